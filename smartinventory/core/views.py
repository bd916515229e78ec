import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from .exceptions import BusinessRuleError
from .models import User
from .security import PathAccessPolicy, HasAdminRole
from .serializers import (
    UserSerializer, RegisterSerializer, LoginSerializer,
    ChangePasswordSerializer, UserWriteSerializer
)
from . import services, tokens

logger = logging.getLogger(__name__)

ADMIN_ONLY = [PathAccessPolicy, HasAdminRole]


@api_view(['POST'])
def register(request):
    """User registration endpoint; the new account is logged in right away"""
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user, token = services.register(request=request, **serializer.validated_data)
    return Response({
        'message': 'User registered successfully',
        'user': UserSerializer(user).data,
        'token': str(token),
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
def login(request):
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user, token = services.login(
        serializer.validated_data['username'],
        serializer.validated_data['password'],
        request=request,
    )
    return Response({
        'message': 'Login successful',
        'token': str(token),
        'user': UserSerializer(user).data,
    })


@api_view(['POST'])
def logout(request):
    """Revoke the bearer token used for this request"""
    if not tokens.revoke_token(request.auth):
        raise BusinessRuleError('Token not found or already revoked')
    return Response({'message': 'Logout successful'})


@api_view(['POST'])
def logout_all(request):
    count = tokens.revoke_all_user_tokens(request.user)
    return Response({'message': 'Logged out from all devices', 'revoked_tokens': count})


@api_view(['GET'])
def me(request):
    """Get current user"""
    data = UserSerializer(request.user).data
    data['active_sessions'] = tokens.active_session_count(request.user)
    return Response(data)


@api_view(['POST'])
def change_password(request):
    serializer = ChangePasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    services.change_password(
        request.user,
        serializer.validated_data['old_password'],
        serializer.validated_data['new_password'],
    )
    return Response({'message': 'Password changed successfully'})


# User management
@api_view(['GET', 'POST'])
@permission_classes(ADMIN_ONLY)
def user_list_create(request):
    """List all users or create a new user"""
    if request.method == 'GET':
        users = User.objects.order_by('id')
        serializer = UserSerializer(users, many=True)
        return Response(serializer.data)

    serializer = UserWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = services.create_user(**serializer.validated_data)
    return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes(ADMIN_ONLY)
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = services.get_user(pk)

    if request.method == 'GET':
        return Response(UserSerializer(user).data)
    elif request.method in ('PUT', 'PATCH'):
        # Updates only touch the fields present in the payload
        serializer = UserWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = services.update_user(user, dict(serializer.validated_data))
        return Response(UserSerializer(user).data)
    else:  # DELETE
        user.delete()
        logger.info(f"User deleted: {user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes(ADMIN_ONLY)
def users_by_role(request, role):
    users = User.objects.filter(role__iexact=role).order_by('id')
    return Response(UserSerializer(users, many=True).data)


@api_view(['GET'])
@permission_classes(ADMIN_ONLY)
def user_count(request):
    return Response({'count': User.objects.count()})
