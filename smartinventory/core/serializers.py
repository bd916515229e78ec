from django.contrib.auth.validators import UnicodeUsernameValidator
from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    authorities = serializers.ListField(child=serializers.CharField(), read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'role', 'authorities', 'phone', 'first_name', 'last_name',
                  'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(min_length=3, max_length=80, validators=[UnicodeUsernameValidator()])
    email = serializers.EmailField(max_length=120)
    password = serializers.CharField(min_length=6, max_length=255, write_only=True)
    role = serializers.CharField(max_length=50, required=False, allow_blank=True)


class LoginSerializer(serializers.Serializer):
    # Either the username or the email address
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)


class ChangePasswordSerializer(serializers.Serializer):
    old_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(min_length=6, max_length=255, write_only=True)


class UserWriteSerializer(serializers.Serializer):
    """Payload for admin user create and update; every field optional on update"""
    username = serializers.CharField(min_length=3, max_length=80, validators=[UnicodeUsernameValidator()])
    email = serializers.EmailField(max_length=120)
    password = serializers.CharField(min_length=6, max_length=255, write_only=True)
    role = serializers.CharField(max_length=50, required=False)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)
