# portal_core/common/openapi.py
from __future__ import annotations

from drf_spectacular.openapi import AutoSchema
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter


class PortalAutoSchema(AutoSchema):
    """
    Global OpenAPI additions for the patient portal API:

    - X-Request-Id (optional) on every endpoint
    - X-Device-Id (optional) on patient auth endpoints, used for passcode throttling
    """

    REQUEST_ID_HEADER = OpenApiParameter(
        name="X-Request-Id",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.HEADER,
        required=False,
        description="Optional correlation id echoed back on the response and written to logs.",
    )

    DEVICE_ID_HEADER = OpenApiParameter(
        name="X-Device-Id",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.HEADER,
        required=False,
        description="Stable client device id. Passcode rate limits are scoped by it (falls back to client IP).",
    )

    def _is_patient_auth_endpoint(self) -> bool:
        view = getattr(self, "view", None)
        if view is None:
            return False
        module = view.__class__.__module__ or ""
        return module.startswith("portal_core.patient_auth.api.")

    def get_override_parameters(self):
        params = list(super().get_override_parameters() or [])
        existing = {p.name.lower() for p in params}

        if "x-request-id" not in existing:
            params.append(self.REQUEST_ID_HEADER)

        if self._is_patient_auth_endpoint() and "x-device-id" not in existing:
            params.append(self.DEVICE_ID_HEADER)

        return params


PRIMARY_API_PREFIX = "/api/v1/"


def preprocess_primary_api_only(endpoints):
    """
    /api/ is an unversioned alias of /api/v1/ for older portal clients.
    Document the versioned paths only, so operationIds stay unique.
    """
    return [
        (path, path_regex, method, callback)
        for path, path_regex, method, callback in endpoints
        if path.startswith(PRIMARY_API_PREFIX) or not path.startswith("/api/")
    ]
