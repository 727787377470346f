import logging

from django.http import JsonResponse
from django.views.decorators.http import require_POST

from core.decorators import admin_required, parse_json_body
from core.exceptions import InvalidRequest
from core.models import Club, Department, ProfessionalSociety

from . import reconcile

logger = logging.getLogger(__name__)


def _invalid_json():
    return JsonResponse({"ok": False, "error": "Invalid JSON"}, status=400)


def _coordinator_ids(data):
    ids = data.get("coordinator_ids")
    if ids is None:
        ids = []
    if not isinstance(ids, list):
        raise InvalidRequest("coordinator_ids must be a list of profile ids.", field="coordinator_ids")
    return ids


@require_POST
@admin_required
def club_coordinators(request, club_id):
    data = parse_json_body(request)
    if data is None:
        return _invalid_json()
    result = reconcile.reconcile_club_coordinators(
        club_id, _coordinator_ids(data), actor=request.user
    )
    return JsonResponse(result.as_dict())


@require_POST
@admin_required
def society_coordinators(request, society_id):
    data = parse_json_body(request)
    if data is None:
        return _invalid_json()
    result = reconcile.reconcile_society_coordinators(
        society_id, _coordinator_ids(data), actor=request.user
    )
    return JsonResponse(result.as_dict())


@require_POST
@admin_required
def department_roster(request, department_id):
    data = parse_json_body(request)
    if data is None:
        return _invalid_json()
    result = reconcile.reconcile_department(
        department_id,
        _coordinator_ids(data),
        hod_id=data.get("hod_id"),
        actor=request.user,
    )
    return JsonResponse(result.as_dict())


def _rename_view(model):
    @require_POST
    @admin_required
    def view(request, unit_id):
        data = parse_json_body(request)
        if data is None:
            return _invalid_json()
        unit = reconcile.rename_unit(model, unit_id, data.get("name"), actor=request.user)
        return JsonResponse({"ok": True, "id": unit.pk, "name": unit.name})

    return view


rename_club = _rename_view(Club)
rename_society = _rename_view(ProfessionalSociety)
rename_department = _rename_view(Department)
