from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .directory import available_machines
from .models import Machine
from .serializers import MachineSerializer, MachineFilterSerializer


class MachineViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only machine directory.

    list: Get machines (optional ?status=, ?accepting=true)
    retrieve: Get a specific machine
    """

    queryset = Machine.objects.all()
    serializer_class = MachineSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    @extend_schema(
        parameters=[
            OpenApiParameter(name='status', type=str, required=False),
            OpenApiParameter(name='accepting', type=bool, required=False),
        ],
        tags=['machines'],
    )
    def list(self, request, *args, **kwargs):
        filters = MachineFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        if filters.validated_data.get('accepting'):
            machines = available_machines()
        else:
            machines = self.get_queryset()
            if 'status' in filters.validated_data:
                machines = machines.filter(status=filters.validated_data['status'])

        return Response(MachineSerializer(machines, many=True).data)
