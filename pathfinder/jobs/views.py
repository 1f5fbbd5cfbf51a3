import logging

from django.db.models import Count, Q
from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from accounts.decorators import admin_required
from applications.models import Application
from .forms import JobForm, job_form_data, missing_job_field, first_error
from .models import Job, JobCategory
from .utils import safe_int, serialize_job

logger = logging.getLogger(__name__)


def _fail(message: str, status: int = 400) -> JsonResponse:
    return JsonResponse({"success": False, "message": message}, status=status)


def _list_jobs(category=None, search=None, limit=None):
    qs = (
        Job.objects.active()
        .select_related("category")
        .in_category(category)
        .search(search)
        .recent()
    )
    limit = safe_int(limit)
    if limit is not None and limit > 0:
        qs = qs[:limit]
    return [serialize_job(job) for job in qs]


# -----------------------------
# Public: browsing + search
# -----------------------------
@require_GET
def job_list(request):
    jobs = _list_jobs(
        category=(request.GET.get("category") or "").strip() or None,
        search=request.GET.get("search"),
        limit=request.GET.get("limit"),
    )
    return JsonResponse({"success": True, "jobs": jobs})


@require_GET
def job_search(request):
    jobs = _list_jobs(search=request.GET.get("q"))
    return JsonResponse({"success": True, "jobs": jobs})


@require_GET
def job_detail(request):
    job_id = safe_int(request.GET.get("id"))
    if job_id is None:
        return _fail("Job ID required")
    job = Job.objects.active().select_related("category").filter(pk=job_id).first()
    if job is None:
        return _fail("Job not found", 404)
    return JsonResponse({"success": True, "job": serialize_job(job)})


@require_GET
def categories(request):
    rows = list(JobCategory.objects.order_by("name").values("id", "name", "slug"))
    return JsonResponse({"success": True, "categories": rows})


@require_GET
def job_stats(request):
    active = Job.objects.active()
    by_category = (
        JobCategory.objects.annotate(count=Count("jobs", filter=Q(jobs__is_active=True)))
        .order_by("name")
        .values("name", "count")
    )
    recent = active.recent().values("title", "company", "created_at")[:5]
    stats = {
        "total_jobs": active.count(),
        "total_applications": Application.objects.count(),
        "jobs_by_category": list(by_category),
        "recent_jobs": [
            {**row, "created_at": row["created_at"].isoformat()} for row in recent
        ],
    }
    return JsonResponse({"success": True, "stats": stats})


# -----------------------------
# Admin: create / edit / soft delete
# -----------------------------
@admin_required
@require_POST
def add_job(request):
    missing = missing_job_field(request.POST)
    if missing:
        return _fail(f"Field '{missing}' is required")

    form = JobForm(job_form_data(request.POST))
    if not form.is_valid():
        logger.warning("Job create failed: errors=%s", form.errors.get_json_data())
        return _fail(first_error(form))

    job = form.save()
    logger.info("Job created: job_id=%s admin=%s", job.id, request.user.email)
    return JsonResponse({"success": True, "message": "Job created successfully", "job_id": job.id})


@admin_required
@require_POST
def update_job(request):
    job_id = safe_int(request.POST.get("id"))
    if job_id is None:
        return _fail("Job ID required")
    job = Job.objects.filter(pk=job_id).first()
    if job is None:
        return _fail("Job not found", 404)

    data = model_to_dict(job, fields=JobForm.Meta.fields)
    data.update(job_form_data(request.POST))
    if data.get("category") is None:
        data["category"] = job.category_id
    form = JobForm(data, instance=job)
    if not form.is_valid():
        logger.warning("Job update failed: job_id=%s errors=%s", job_id, form.errors.get_json_data())
        return _fail(first_error(form))

    form.save()
    logger.info("Job updated: job_id=%s admin=%s", job.id, request.user.email)
    return JsonResponse({"success": True, "message": "Job updated successfully"})


@admin_required
@require_POST
def delete_job(request):
    job_id = safe_int(request.POST.get("id"))
    if job_id is None:
        return _fail("Job ID required")
    job = Job.objects.active().filter(pk=job_id).first()
    if job is None:
        return _fail("Job not found", 404)
    job.deactivate()
    logger.info("Job deactivated: job_id=%s admin=%s", job_id, request.user.email)
    return JsonResponse({"success": True, "message": "Job deleted successfully"})
