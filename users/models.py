# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    full_name = models.CharField(max_length=150, blank=True)
    organization = models.CharField(max_length=255, blank=True, null=True)

    def __str__(self):
        return self.username

    @property
    def display_name(self):
        return self.full_name or self.get_full_name() or self.username
