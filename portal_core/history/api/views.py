# portal_core/history/api/views.py
from __future__ import annotations

from urllib.parse import quote
from uuid import UUID

from django.http import FileResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from portal_core.history.api.serializers import VisitDetailSerializer, VisitPageSerializer
from portal_core.history.selectors import get_document, get_visit_detail, list_visits


class VisitListView(APIView):
    """
    GET /api/v1/patient/history/visits/?cursor=&limit=
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        parameters=[
            OpenApiParameter(name="cursor", type=OpenApiTypes.STR, required=False),
            OpenApiParameter(name="limit", type=OpenApiTypes.INT, required=False, description="1-50, default 20"),
        ],
        responses={200: VisitPageSerializer},
        tags=["Patient History"],
    )
    def get(self, request):
        page = list_visits(
            principal=request.user,
            cursor=request.query_params.get("cursor") or None,
            limit=request.query_params.get("limit"),
        )
        data = VisitPageSerializer({"visits": page.visits, "next_cursor": page.next_cursor}).data
        return Response(data, status=status.HTTP_200_OK)


class VisitDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        responses={200: VisitDetailSerializer},
        tags=["Patient History"],
    )
    def get(self, request, visit_id: UUID):
        detail = get_visit_detail(principal=request.user, visit_id=visit_id)
        return Response(VisitDetailSerializer(detail).data, status=status.HTTP_200_OK)


class DocumentDownloadView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        responses={(200, "application/octet-stream"): OpenApiResponse(response=OpenApiTypes.BINARY)},
        tags=["Patient History"],
    )
    def get(self, request, document_id: UUID):
        doc = get_document(principal=request.user, document_id=document_id)

        res = FileResponse(doc.file, content_type=doc.content_type)
        res["Content-Length"] = str(doc.size)
        if doc.file_name:
            res["Content-Disposition"] = f'inline; filename="{quote(doc.file_name)}"'
        return res
