"""HTTP views for campaign applications.

Views stay thin: resolve the caller, validate the body, call the logic
layer and render JSON. Domain exceptions are translated to HTTP status
codes in one place, ``api_view``.
"""

import json
import logging
import uuid
from collections.abc import Callable
from functools import wraps
from typing import Any, Final

from django.core.exceptions import (
    BadRequest,
    TooManyFilesSent,
    ValidationError,
)
from django.http import (
    FileResponse,
    HttpRequest,
    HttpResponse,
    HttpResponseBase,
    JsonResponse,
)
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import (
    require_GET,
    require_http_methods,
    require_POST,
)

from server.apps.campaign_applications.exceptions import (
    ConflictError,
    FileTooLargeError,
    ForbiddenError,
    InvalidFileTypeError,
    InvalidTransitionError,
    NotFoundError,
    StorageFailureError,
    TooManyFilesError,
)
from server.apps.campaign_applications.forms import (
    CampaignApplicationCreateForm,
    CampaignApplicationUpdateForm,
)
from server.apps.campaign_applications.infrastructure.upload_handlers import (
    SizeLimitUploadHandler,
)
from server.apps.campaign_applications.logic.application_operations import (
    create_application,
    get_application,
    list_applications,
    update_application,
)
from server.apps.campaign_applications.logic.attachment_operations import (
    delete_file,
    fetch_file,
    upload_files,
)
from server.apps.campaign_applications.serializers import (
    serialize_application,
    serialize_file,
)
from server.apps.people.exceptions import (
    PersonNotFoundError,
    UnauthenticatedError,
)
from server.apps.people.logic.identity import actor_from_request

logger = logging.getLogger(__name__)

# Multipart field carrying the uploaded files
UPLOAD_FIELD: Final = 'file'

# Exception type -> (HTTP status, error code); first match wins
_ERROR_RESPONSES: Final[tuple[tuple[type[Exception], int, str], ...]] = (
    (UnauthenticatedError, 401, 'unauthenticated'),
    (PersonNotFoundError, 404, 'not_found'),
    (NotFoundError, 404, 'not_found'),
    (ForbiddenError, 403, 'forbidden'),
    (InvalidFileTypeError, 415, 'invalid_file_type'),
    (FileTooLargeError, 413, 'file_too_large'),
    (TooManyFilesError, 400, 'too_many_files'),
    (TooManyFilesSent, 400, 'too_many_files'),
    (InvalidTransitionError, 400, 'invalid_transition'),
    (ConflictError, 409, 'conflict'),
    (StorageFailureError, 503, 'storage_failure'),
    (ValidationError, 400, 'validation_error'),
    (BadRequest, 400, 'bad_request'),
)

_HANDLED_ERRORS: Final = tuple(error for error, _, _ in _ERROR_RESPONSES)

_View = Callable[..., HttpResponseBase]


def _error_response(error: Exception) -> JsonResponse:
    """Render a domain exception as a JSON error.

    Args:
        error: Exception raised by the view.

    Returns:
        JSON response with the mapped status code.
    """
    status, code = next(
        (status, code)
        for error_type, status, code in _ERROR_RESPONSES
        if isinstance(error, error_type)
    )
    body: dict[str, Any] = {'error': code}
    if isinstance(error, ValidationError):
        body['message'] = ' '.join(error.messages)
        if hasattr(error, 'error_dict'):
            body['fields'] = error.message_dict
    else:
        body['message'] = str(error)
    return JsonResponse(body, status=status)


def api_view(view: _View) -> _View:
    """Translate domain exceptions raised by a view into JSON errors.

    Wrapped views are exempt from CSRF checks.

    Args:
        view: View function.

    Returns:
        Wrapped view function.
    """
    @wraps(view)
    def wrapper(
        request: HttpRequest,
        *args: Any,
        **kwargs: Any,
    ) -> HttpResponseBase:
        try:
            return view(request, *args, **kwargs)
        except _HANDLED_ERRORS as error:
            logger.info(
                '%s %s failed: %s',
                request.method,
                request.path,
                error,
            )
            return _error_response(error)

    return csrf_exempt(wrapper)


def _parse_json(request: HttpRequest) -> dict[str, Any]:
    """Decode a JSON object from the request body.

    Args:
        request: HTTP request.

    Returns:
        Decoded object.

    Raises:
        BadRequest: If the body is not a JSON object.
    """
    try:
        payload = json.loads(request.body or b'{}')
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise BadRequest('Request body must be valid JSON') from error
    if not isinstance(payload, dict):
        raise BadRequest('Request body must be a JSON object')
    return payload


@api_view
@require_POST
def create(request: HttpRequest) -> JsonResponse:
    """Submit a new campaign application."""
    actor = actor_from_request(request)

    form = CampaignApplicationCreateForm(_parse_json(request))
    if not form.is_valid():
        raise ValidationError(form.errors.as_data())

    application = create_application(form.cleaned_data, actor.person)
    return JsonResponse(serialize_application(application), status=201)


@api_view
@require_POST
def upload_file(request: HttpRequest, application_id: uuid.UUID) -> JsonResponse:
    """Attach uploaded files to an application."""
    actor = actor_from_request(request)
    # Must run before the body is parsed
    request.upload_handlers.insert(0, SizeLimitUploadHandler(request))

    attachments = upload_files(
        application_id,
        request.FILES.getlist(UPLOAD_FIELD),
        actor.person,
    )
    return JsonResponse(
        [serialize_file(attachment) for attachment in attachments],
        safe=False,
        status=201,
    )


@api_view
@require_GET
def list_all(request: HttpRequest) -> JsonResponse:
    """List every application (administrators only)."""
    actor = actor_from_request(request)

    applications = list_applications(actor)
    return JsonResponse(
        [serialize_application(application) for application in applications],
        safe=False,
    )


@api_view
@require_GET
def by_id(request: HttpRequest, application_id: uuid.UUID) -> JsonResponse:
    """Get one application visible to the caller."""
    actor = actor_from_request(request)

    application = get_application(application_id, actor)
    return JsonResponse(serialize_application(application))


@api_view
@require_http_methods(['GET', 'DELETE'])
def file_by_id(request: HttpRequest, file_id: uuid.UUID) -> HttpResponseBase:
    """Download (GET) or delete (DELETE) an attachment."""
    actor = actor_from_request(request)

    if request.method == 'DELETE':
        delete_file(file_id, actor)
        return HttpResponse(status=204)

    handle = fetch_file(file_id, actor)
    # FileResponse streams the body in blocks and closes it when done
    response = FileResponse(handle.stream, content_type=handle.mime_type)
    response['Content-Length'] = str(handle.size_bytes)
    response['Content-Disposition'] = handle.content_disposition
    response['Cache-Control'] = handle.cache_control
    return response


@api_view
@require_http_methods(['PATCH'])
def update(request: HttpRequest, application_id: uuid.UUID) -> JsonResponse:
    """Partially update an application."""
    actor = actor_from_request(request)

    form = CampaignApplicationUpdateForm(_parse_json(request))
    if not form.is_valid():
        raise ValidationError(form.errors.as_data())

    application = update_application(
        application_id,
        form.get_changes(),
        actor,
        expected_version=form.get_expected_version(),
    )
    # Re-read so the response carries the attachments
    return JsonResponse(
        serialize_application(get_application(application.id, actor)),
    )
