# portal_core/patient_auth/auth.py
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication

from portal_core.patient_auth.tokens import jwt_config, verify_access_token


class PatientCookieJWTAuthentication(JWTAuthentication):
    """
    Authenticate portal patients using:
      1) Authorization: Bearer <access>
      2) HttpOnly cookie containing the access token

    Stateless: request.user is a PatientPrincipal built from the claims,
    no database lookup.
    """

    def authenticate(self, request):
        # 1) Prefer Authorization header
        header = self.get_header(request)
        if header:
            raw_token = self.get_raw_token(header)
            if raw_token is None:
                return None
        else:
            # 2) Cookie access token
            raw_token = request.COOKIES.get(jwt_config()["AUTH_COOKIE"])
            if not raw_token:
                return None

        principal = verify_access_token(raw_token)
        return principal, raw_token
