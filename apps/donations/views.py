from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsNGOStaff
from apps.common.exceptions import LedgerError
from apps.common.responses import ledger_error_response

from .models import DonationRequest
from .permissions import IsDonorOrNGOStaff
from .serializers import (
    DenyInputSerializer,
    DonationAuditEntrySerializer,
    DonationFilterSerializer,
    DonationRequestSerializer,
    DonationSubmitSerializer,
    VerificationResponseSerializer,
    VerifyInputSerializer,
)
from .services import (
    approve_donation,
    deny_donation,
    get_pending_queue,
    submit_donation,
    verify_donation,
)


class DonationPagination(PageNumberPagination):
    """Custom pagination for donation requests."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class DonationRequestViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for donation requests.

    All state changes go through the lifecycle services.

    list: Donors get their own requests, NGO staff get all
    create: Submit a new donation request
    retrieve: Get a specific request
    """

    serializer_class = DonationRequestSerializer
    permission_classes = [IsAuthenticated, IsDonorOrNGOStaff]
    pagination_class = DonationPagination

    def get_queryset(self):
        user = self.request.user
        queryset = DonationRequest.objects.select_related(
            'donor', 'reviewed_by', 'verified_by'
        )
        if not user.is_ngo_staff:
            queryset = queryset.filter(donor=user)

        if self.action == 'list':
            filters = DonationFilterSerializer(data=self.request.query_params)
            filters.is_valid(raise_exception=True)
            if 'status' in filters.validated_data:
                queryset = queryset.filter(status=filters.validated_data['status'])
            if filters.validated_data.get('active') is True:
                queryset = queryset.active()
            elif filters.validated_data.get('active') is False:
                queryset = queryset.exclude(id__in=DonationRequest.objects.active().values('id'))
        return queryset

    def get_permissions(self):
        if self.action in ['queue', 'approve', 'deny', 'verify']:
            return [IsAuthenticated(), IsNGOStaff()]
        return super().get_permissions()

    @extend_schema(
        parameters=[
            OpenApiParameter(name='status', type=str, required=False),
            OpenApiParameter(name='active', type=bool, required=False),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=DonationSubmitSerializer, responses={201: DonationRequestSerializer})
    def create(self, request, *args, **kwargs):
        """Submit a donation request as the current user."""
        serializer = DonationSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            donation = submit_donation(donor=request.user, **serializer.validated_data)
        except LedgerError as e:
            return ledger_error_response(e)

        return Response(
            DonationRequestSerializer(donation).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(responses={200: DonationRequestSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def queue(self, request):
        """Requests awaiting review or verification, oldest first."""
        queryset = get_pending_queue()
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = DonationRequestSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(DonationRequestSerializer(queryset, many=True).data)

    @extend_schema(request=None, responses={200: DonationRequestSerializer})
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        try:
            donation = approve_donation(request_id=pk, reviewer=request.user)
        except LedgerError as e:
            return ledger_error_response(e)

        return Response(DonationRequestSerializer(donation).data)

    @extend_schema(request=DenyInputSerializer, responses={200: DonationRequestSerializer})
    @action(detail=True, methods=['post'])
    def deny(self, request, pk=None):
        """Reject the request with a reason shown to the donor."""
        serializer = DenyInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            donation = deny_donation(
                request_id=pk,
                reviewer=request.user,
                reason=serializer.validated_data['reason'],
            )
        except LedgerError as e:
            return ledger_error_response(e)

        return Response(DonationRequestSerializer(donation).data)

    @extend_schema(request=VerifyInputSerializer, responses={200: VerificationResponseSerializer})
    @action(detail=True, methods=['post'])
    def verify(self, request, pk=None):
        """Confirm receipt with proof and move the quantity into stock."""
        serializer = VerifyInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = verify_donation(
                request_id=pk,
                verifier=request.user,
                proof_image=serializer.validated_data['proof_image'],
            )
        except LedgerError as e:
            return ledger_error_response(e)

        return Response(VerificationResponseSerializer(result._asdict()).data)

    @extend_schema(responses={200: DonationAuditEntrySerializer(many=True)})
    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        """Audit trail of the request."""
        donation = self.get_object()
        entries = donation.audit_entries.select_related('actor')
        return Response(DonationAuditEntrySerializer(entries, many=True).data)
