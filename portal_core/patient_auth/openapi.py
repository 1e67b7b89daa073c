from drf_spectacular.extensions import OpenApiAuthenticationExtension


class PatientCookieJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "portal_core.patient_auth.auth.PatientCookieJWTAuthentication"
    name = "PatientBearerOrCookieJWT"

    def get_security_definition(self, auto_schema):
        # Documented as Bearer so Swagger "Authorize" works; the cookie is accepted too.
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Send the patient access token via `Authorization: Bearer <token>` "
                "or via HttpOnly cookie (patient_access_token)."
            ),
        }
