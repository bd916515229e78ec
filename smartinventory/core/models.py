from django.contrib.auth.models import AbstractUser, UserManager as BaseUserManager
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', User.ROLE_ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    """Application user; the role drives authorization"""
    ROLE_USER = 'USER'
    ROLE_ADMIN = 'ADMIN'

    email = models.EmailField(max_length=120, unique=True)
    role = models.CharField(max_length=50, default=ROLE_USER)
    phone = models.CharField(max_length=20, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    @property
    def authorities(self):
        """Granted authorities, one per role"""
        return [f'ROLE_{self.role}']

    def has_role(self, role):
        return f'ROLE_{role}' in self.authorities

    class Meta:
        db_table = 'users'


class IssuedToken(models.Model):
    """Access tokens handed out at login, kept so they can be revoked"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='issued_tokens')
    jti = models.CharField(max_length=64, unique=True)
    token = models.TextField()
    token_type = models.CharField(max_length=20, default='Bearer')
    expires_at = models.DateTimeField()
    revoked = models.BooleanField(default=False)
    user_agent = models.CharField(max_length=500, blank=True, null=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user_id} - {self.jti}"

    @property
    def is_expired(self):
        return timezone.now() > self.expires_at

    @property
    def is_valid(self):
        return not self.is_expired and not self.revoked

    def revoke(self):
        self.revoked = True
        self.save(update_fields=['revoked'])

    class Meta:
        db_table = 'issued_tokens'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'revoked'], name='issued_toke_user_id_5d8a1c_idx'),
            models.Index(fields=['expires_at'], name='issued_toke_expires_9b2e4f_idx'),
        ]
