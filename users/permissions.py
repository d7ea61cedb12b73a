from rest_framework import permissions


class IsEvaluatorOrAdmin(permissions.BasePermission):
    """
    Allows access to Admins and Evaluators.
    Strictly blocks Students.
    """
    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return request.user.is_evaluator
