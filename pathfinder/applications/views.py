import logging
from functools import wraps

from django.http import FileResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from accounts.context import RequestContext
from accounts.decorators import admin_required, login_required_json
from jobs.utils import safe_int
from .models import Application
from .repository import ApplicationRepository
from .results import ApplicationError
from .services import ApplicationWorkflow
from .storage import CATEGORY_DIRS, DocumentStore
from .utils import serialize_application

logger = logging.getLogger(__name__)


def _fail(message: str, status: int = 400) -> JsonResponse:
    return JsonResponse({"success": False, "message": message}, status=status)


def error_response(error: ApplicationError) -> JsonResponse:
    return _fail(error.message, error.http_status)


def json_errors(message: str):
    """Turn unexpected exceptions into a generic envelope; details go to the log only."""
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            try:
                return view_func(request, *args, **kwargs)
            except Exception:
                logger.exception("Unhandled error in %s", view_func.__name__)
                return _fail(message, 500)
        return _wrapped
    return decorator


def get_workflow() -> ApplicationWorkflow:
    return ApplicationWorkflow()


# -----------------------------
# Public: submit an application
# -----------------------------
@require_POST
@json_errors("Failed to submit application")
def submit_application(request):
    job_id = (request.POST.get("job_id") or "").strip()
    if not job_id:
        return _fail("Job ID required")

    result = get_workflow().submit(
        job_id,
        request.POST,
        request.FILES,
        RequestContext.from_request(request),
    )
    if isinstance(result, ApplicationError):
        return error_response(result)
    return JsonResponse(
        {"success": True, "message": result.message, "application_id": result.application_id}
    )


# -----------------------------
# Admin: triage
# -----------------------------
@admin_required
@require_POST
@json_errors("Failed to update status")
def update_status(request):
    application_id = request.POST.get("id")
    status = request.POST.get("status")
    if not application_id or not status:
        return _fail("Application ID and status required")

    result = get_workflow().update_status(application_id, status)
    if isinstance(result, ApplicationError):
        return error_response(result)
    logger.info("Status changed by admin: app_id=%s status=%s admin=%s", result.application_id, result.status, request.user.email)
    return JsonResponse({"success": True, "message": result.message})


@admin_required
@require_GET
@json_errors("Failed to fetch application")
def application_detail(request):
    application_id = safe_int(request.GET.get("id"))
    if application_id is None:
        return _fail("Application ID required")
    try:
        app = ApplicationRepository().get(application_id)
    except Application.DoesNotExist:
        return _fail("Application not found", 404)
    return JsonResponse({"success": True, "application": serialize_application(app)})


@admin_required
@require_GET
@json_errors("Failed to fetch applications")
def application_list(request):
    status = (request.GET.get("status") or "").strip() or None
    limit = safe_int(request.GET.get("limit"))
    apps = ApplicationRepository().list(status=status, limit=limit)
    return JsonResponse({"success": True, "applications": [serialize_application(a) for a in apps]})


@admin_required
@require_GET
@json_errors("Failed to fetch applications")
def job_applications(request):
    job_id = safe_int(request.GET.get("job_id"))
    if job_id is None:
        return _fail("Job ID required")
    apps = ApplicationRepository().for_job(job_id)
    return JsonResponse({"success": True, "applications": [serialize_application(a) for a in apps]})


@admin_required
@require_GET
@json_errors("Failed to fetch statistics")
def application_stats(request):
    return JsonResponse({"success": True, "stats": ApplicationRepository().stats(recent=5)})


@admin_required
@require_GET
def download_document(request, category: str, name: str):
    store = DocumentStore()
    if category not in CATEGORY_DIRS or not store.exists(name, category):
        return _fail("Document not found", 404)
    logger.info("Document downloaded: category=%s name=%s admin=%s", category, name, request.user.email)
    return FileResponse(store.path(name, category).open("rb"), as_attachment=True, filename=name)


# -----------------------------
# Applicant: my applications
# -----------------------------
@login_required_json
@require_GET
@json_errors("Failed to fetch applications")
def my_applications(request):
    context = RequestContext.from_request(request)
    user_id = context.user_id
    requested = safe_int(request.GET.get("user_id"))
    if requested is not None and requested != user_id:
        if not context.is_admin:
            return _fail("Access denied", 403)
        user_id = requested

    apps = ApplicationRepository().for_user(user_id)
    return JsonResponse(
        {"success": True, "applications": [serialize_application(a, with_color=True) for a in apps]}
    )
