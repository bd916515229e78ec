from django.urls import path
from .views import (
    register, login, logout, logout_all, me, change_password,
    user_list_create, user_detail, users_by_role, user_count
)

urlpatterns = [
    # Auth endpoints
    path('auth/register', register, name='register'),
    path('auth/login', login, name='login'),
    path('auth/logout', logout, name='logout'),
    path('auth/logout-all', logout_all, name='logout-all'),
    path('auth/me', me, name='user-me'),
    path('auth/change-password', change_password, name='change-password'),

    # User endpoints
    path('users', user_list_create, name='user-list-create'),
    path('users/count', user_count, name='user-count'),
    path('users/role/<str:role>', users_by_role, name='users-by-role'),
    path('users/<int:pk>', user_detail, name='user-detail'),
]
