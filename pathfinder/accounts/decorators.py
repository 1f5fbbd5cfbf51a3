from functools import wraps

from django.http import JsonResponse


def _deny(message: str, status: int) -> JsonResponse:
    return JsonResponse({"success": False, "message": message}, status=status)


def login_required_json(view_func):
    """Like login_required, but answers API callers with a JSON envelope."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return _deny("Not logged in", 401)
        return view_func(request, *args, **kwargs)
    return _wrapped


def role_required(role: str):
    """Ensure logged-in user has the given role."""
    def decorator(view_func):
        @login_required_json
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            user = request.user
            if user.is_superuser or getattr(user, "role", None) == role:
                return view_func(request, *args, **kwargs)
            return _deny("Access denied", 403)
        return _wrapped
    return decorator


admin_required = role_required("admin")
