import logging

from django.conf import settings
from django.contrib.auth import login, logout, get_user_model, update_session_auth_hash
from django.http import JsonResponse
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_http_methods, require_POST, require_GET

from .decorators import login_required_json
from .forms import RegistrationForm, LoginForm, ProfileUpdateForm, first_error

logger = logging.getLogger(__name__)
User = get_user_model()


def _fail(message: str, status: int = 400) -> JsonResponse:
    return JsonResponse({"success": False, "message": message}, status=status)


def _user_info(user) -> dict:
    if user.is_admin:
        return {"id": user.pk, "email": user.email, "type": "admin"}
    return {"id": user.pk, "name": user.display_name(), "email": user.email, "type": "user"}


def _start_session(request, user) -> None:
    login(request, user, backend="django.contrib.auth.backends.ModelBackend")
    # Explicit expiry (1 hour by default)
    request.session.set_expiry(getattr(settings, "SESSION_COOKIE_AGE", 3600))
    request.session["role"] = user.role


# -----------------------------
# Register
# -----------------------------
@require_POST
def register(request):
    form = RegistrationForm(request.POST)
    if not form.is_valid():
        logger.warning("Registration failed: errors=%s", form.errors.get_json_data())
        return _fail(first_error(form))

    email = form.cleaned_data["email"]
    User.objects.create_user(
        username=email,
        email=email,
        password=form.cleaned_data["password"],
        full_name=form.cleaned_data["full_name"].strip(),
        phone=form.cleaned_data["phone"].strip(),
        role=User.Role.USER,
    )
    logger.info("User registered: email=%s", email)
    return JsonResponse({"success": True, "message": "Registration successful"})


# -----------------------------
# Login (user / admin)
# -----------------------------
def _authenticate(request, *, admin: bool):
    form = LoginForm(request.POST)
    if not form.is_valid():
        if "email" in form.errors and (request.POST.get("email") or "").strip():
            return None, _fail("Invalid email format")
        return None, _fail("Email and password are required")

    email = form.cleaned_data["email"].strip().lower()
    user = User.objects.filter(email__iexact=email).first()
    if user is None or not user.is_active or not user.check_password(form.cleaned_data["password"]):
        return None, None
    if user.is_admin != admin:
        return None, None
    return user, None


@require_POST
def user_login(request):
    user, error = _authenticate(request, admin=False)
    if error is not None:
        return error
    if user is None:
        logger.info("Login failed: email=%s", request.POST.get("email"))
        return _fail("Invalid email or password", 401)

    _start_session(request, user)
    logger.info("Login success: email=%s", user.email)
    return JsonResponse({"success": True, "message": "Login successful", "user": _user_info(user)})


@require_POST
def admin_login(request):
    user, error = _authenticate(request, admin=True)
    if error is not None:
        return error
    if user is None:
        logger.warning("Admin login failed: email=%s", request.POST.get("email"))
        return _fail("Invalid admin credentials", 401)

    _start_session(request, user)
    logger.info("Admin login success: email=%s", user.email)
    return JsonResponse({"success": True, "message": "Admin login successful", "admin": _user_info(user)})


@require_POST
def user_logout(request):
    email = request.user.email if request.user.is_authenticated else None
    logout(request)
    if email:
        logger.info("Logout: email=%s", email)
    return JsonResponse({"success": True, "message": "Logged out successfully"})


# -----------------------------
# Session check (AJAX)
# -----------------------------
@require_GET
@ensure_csrf_cookie
def session_status(request):
    user = request.user
    logged_in = user.is_authenticated
    is_admin = bool(logged_in and user.is_admin)
    return JsonResponse(
        {
            "logged_in": logged_in,
            "is_admin": is_admin,
            "is_user": logged_in and not is_admin,
            "user_info": _user_info(user) if logged_in else None,
        }
    )


# -----------------------------
# Profile
# -----------------------------
@login_required_json
@require_http_methods(["GET", "POST"])
def profile(request):
    user = request.user
    if request.method == "GET":
        return JsonResponse(
            {
                "success": True,
                "user": {"full_name": user.full_name, "email": user.email, "phone": user.phone},
            }
        )

    action = request.POST.get("action") or ""
    if action == "update":
        form = ProfileUpdateForm(request.POST, user=user)
        if not form.is_valid():
            return _fail(first_error(form))
        user.full_name = form.cleaned_data["full_name"].strip()
        user.email = form.cleaned_data["email"]
        user.username = user.email
        user.phone = (form.cleaned_data.get("phone") or "").strip()
        new_password = form.cleaned_data.get("new_password")
        if new_password:
            user.set_password(new_password)
        user.save()
        if new_password:
            update_session_auth_hash(request, user)
        logger.info("Profile updated: user_id=%s password_changed=%s", user.pk, bool(new_password))
        return JsonResponse({"success": True, "message": "Profile updated successfully"})

    if action == "delete":
        user_id = user.pk
        logout(request)
        User.objects.filter(pk=user_id).delete()
        logger.info("Account deleted: user_id=%s", user_id)
        return JsonResponse({"success": True, "message": "Account deleted successfully"})

    return _fail("Invalid action")
