# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    class Role(models.TextChoices):
        STUDENT = "student", "Student"
        EVALUATOR = "evaluator", "Evaluator"
        ADMIN = "admin", "Admin"

    # Enforce unique email for authentication
    email = models.EmailField(unique=True)

    role = models.CharField(max_length=20, choices=Role.choices, default=Role.STUDENT)
    phone_number = models.CharField(max_length=15, blank=True)

    # Set email as the main field for authentication
    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    @property
    def is_evaluator(self):
        return self.is_staff or self.role in (self.Role.EVALUATOR, self.Role.ADMIN)

    def __str__(self):
        return self.email
