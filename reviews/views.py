"""HTTP views for teams, users, and pull requests."""

import logging

from django.http import JsonResponse
from rest_framework.decorators import api_view
from rest_framework.response import Response

from reviews.engine import build_engine
from reviews.errors import ErrorCode, ReviewError, StoreFailure
from reviews.serializers import (
    PullRequestCreateSerializer,
    PullRequestMergeSerializer,
    PullRequestReassignSerializer,
    SetIsActiveSerializer,
    TeamSerializer,
)

logger = logging.getLogger("reviews.views")

_STATUS_BY_CODE = {
    ErrorCode.TEAM_EXISTS: 400,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.PR_EXISTS: 409,
    ErrorCode.PR_MERGED: 409,
    ErrorCode.REVIEWER_IS_AUTHOR: 409,
    ErrorCode.NOT_ASSIGNED: 409,
    ErrorCode.NO_CANDIDATE: 409,
    ErrorCode.STORE_FAILURE: 500,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error(code: ErrorCode, message: str, status: int, **extra) -> Response:
    body = {"code": code.value, "message": message, **extra}
    return Response({"error": body}, status=status)


def _error_from_exception(exc: ReviewError) -> Response:
    """Map an engine error to its HTTP response."""
    if isinstance(exc, StoreFailure):
        logger.error("Store failure: %s", exc, exc_info=exc.__cause__)
        return _error(exc.code, "internal server error", 500)
    logger.warning("Request rejected (%s): %s", exc.code.value, exc.message)
    return _error(exc.code, exc.message, _STATUS_BY_CODE.get(exc.code, 400))


def _validate(serializer_class, data):
    """Validate *data*, returning ``(serializer, None)`` or ``(None, Response)``."""
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        return None, _error(
            ErrorCode.INVALID_REQUEST, "invalid request body", 400, details=serializer.errors,
        )
    return serializer, None


def _require_query_param(request, name):
    value = request.query_params.get(name, "")
    if not value:
        return None, _error(ErrorCode.INVALID_REQUEST, f"{name} query parameter is required", 400)
    return value, None


# ---------------------------------------------------------------------------
# Core views
# ---------------------------------------------------------------------------

def health_check(request):
    """Return a simple health-check response."""
    return JsonResponse({"status": "ok"})


@api_view(["POST"])
def team_add(request):
    """Register a team together with its members."""
    serializer, err = _validate(TeamSerializer, request.data)
    if err:
        return err

    try:
        team = build_engine().create_team(serializer.validated_data["team_name"], serializer.to_members())
    except ReviewError as e:
        return _error_from_exception(e)

    return Response({"team": team.to_dict()}, status=201)


@api_view(["GET"])
def team_get(request):
    """Return a team with its members in registration order."""
    team_name, err = _require_query_param(request, "team_name")
    if err:
        return err

    try:
        team = build_engine().get_team(team_name)
    except ReviewError as e:
        return _error_from_exception(e)

    return Response(team.to_dict())


@api_view(["POST"])
def users_set_is_active(request):
    """Toggle a user's active flag."""
    serializer, err = _validate(SetIsActiveSerializer, request.data)
    if err:
        return err

    data = serializer.validated_data
    try:
        user = build_engine().set_user_active(data["user_id"], data["is_active"])
    except ReviewError as e:
        return _error_from_exception(e)

    return Response({"user": user.to_dict()})


@api_view(["GET"])
def users_get_review(request):
    """Return the pull requests a user is currently assigned to review."""
    user_id, err = _require_query_param(request, "user_id")
    if err:
        return err

    try:
        pull_requests = build_engine().get_user_pull_requests(user_id)
    except ReviewError as e:
        return _error_from_exception(e)

    return Response({
        "user_id": user_id,
        "pull_requests": [pr.to_dict() for pr in pull_requests],
    })


@api_view(["POST"])
def pull_request_create(request):
    """Create a pull request and auto-assign reviewers."""
    serializer, err = _validate(PullRequestCreateSerializer, request.data)
    if err:
        return err

    data = serializer.validated_data
    try:
        pr = build_engine().create_pull_request(
            data["pull_request_id"], data["pull_request_name"], data["author_id"],
        )
    except ReviewError as e:
        return _error_from_exception(e)

    return Response({"pull_request": pr.to_dict()}, status=201)


@api_view(["POST"])
def pull_request_merge(request):
    """Mark a pull request as merged; repeat calls return the same record."""
    serializer, err = _validate(PullRequestMergeSerializer, request.data)
    if err:
        return err

    try:
        pr = build_engine().merge_pull_request(serializer.validated_data["pull_request_id"])
    except ReviewError as e:
        return _error_from_exception(e)

    return Response({"pull_request": pr.to_dict()})


@api_view(["POST"])
def pull_request_reassign(request):
    """Replace one assigned reviewer with another on an open pull request."""
    serializer, err = _validate(PullRequestReassignSerializer, request.data)
    if err:
        return err

    data = serializer.validated_data
    try:
        pr = build_engine().reassign_reviewer(
            data["pull_request_id"], data["old_reviewer_id"], data["new_reviewer_id"],
        )
    except ReviewError as e:
        return _error_from_exception(e)

    return Response({"pull_request": pr.to_dict()})
