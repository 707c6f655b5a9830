"""
Registry app ViewSets.

Views are intentionally thin: validate input via a serializer, delegate
to the service classes, serialize the result.  Capability checks are
enforced exclusively inside the service layer.

ViewSets
--------
- ``PersonViewSet``          — /persons/
- ``OrganizationViewSet``    — /organizations/  (+ crime-stats,
                               relationships, memberships, journal)
- ``MembershipViewSet``      — /memberships/
- ``OrgRelationshipViewSet`` — /relationships/
- ``JournalEntryViewSet``    — /journal-entries/
- ``IncidentViewSet``        — /incidents/
- ``ManufacturerViewSet``    — /manufacturers/  (+ models)
- ``ShipModelViewSet``       — /ship-models/
- ``ShipViewSet``            — /ships/  (+ crew, journal)
- ``ShipAssignmentViewSet``  — /ship-assignments/
- ``ShipJournalEntryViewSet`` — /ship-journal-entries/
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from .serializers import (
    IncidentFilterSerializer,
    IncidentReportSerializer,
    IncidentSerializer,
    IncidentUpdateSerializer,
    ManufacturerSerializer,
    MembershipSerializer,
    OrganizationJournalSerializer,
    OrganizationSerializer,
    OrgRelationshipSerializer,
    PersonDetailSerializer,
    PersonListSerializer,
    PersonWriteSerializer,
    ShipAssignmentSerializer,
    ShipFilterSerializer,
    ShipJournalSerializer,
    ShipModelSerializer,
    ShipModelFilterSerializer,
    ShipSerializer,
)
from .services import (
    IncidentService,
    JournalService,
    ManufacturerService,
    MembershipService,
    OrganizationService,
    OrgRelationshipService,
    PersonService,
    ShipAssignmentService,
    ShipJournalService,
    ShipModelService,
    ShipService,
)

_SEARCH_PARAM = OpenApiParameter(
    name="search", type=str, location=OpenApiParameter.QUERY,
    description="Case-insensitive free-text search.",
)


class PersonViewSet(viewsets.ViewSet):
    """/api/registry/persons/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Search persons",
        parameters=[_SEARCH_PARAM],
        responses={200: OpenApiResponse(response=PersonListSerializer(many=True))},
        tags=["Persons"],
    )
    def list(self, request: Request) -> Response:
        qs = PersonService.search(request.user, request.query_params.get("search"))
        return Response(PersonListSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Create person",
        request=PersonWriteSerializer,
        responses={
            201: OpenApiResponse(response=PersonDetailSerializer),
            409: OpenApiResponse(description="Handle already registered."),
        },
        tags=["Persons"],
    )
    def create(self, request: Request) -> Response:
        serializer = PersonWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        person = PersonService.create_person(serializer.validated_data, request.user)
        return Response(PersonDetailSerializer(person).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Person dossier",
        responses={
            200: OpenApiResponse(response=PersonDetailSerializer),
            404: OpenApiResponse(description="Person not found."),
        },
        tags=["Persons"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        person, stats = PersonService.get_dossier(request.user, pk)
        out = PersonDetailSerializer(person, context={"crime_stats": stats})
        return Response(out.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update person",
        request=PersonWriteSerializer,
        responses={200: OpenApiResponse(response=PersonDetailSerializer)},
        tags=["Persons"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = PersonWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        person = PersonService.update_person(pk, serializer.validated_data, request.user)
        return Response(PersonDetailSerializer(person).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Person memberships",
        responses={200: OpenApiResponse(response=MembershipSerializer(many=True))},
        tags=["Persons"],
    )
    @action(detail=True, methods=["get"], url_path="memberships")
    def memberships(self, request: Request, pk: str = None) -> Response:
        person = PersonService.get_person(pk)
        qs = MembershipService.list_memberships(person_id=person.pk)
        return Response(MembershipSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Ships the person is assigned to",
        responses={200: OpenApiResponse(response=ShipAssignmentSerializer(many=True))},
        tags=["Persons"],
    )
    @action(detail=True, methods=["get"], url_path="ships")
    def ships(self, request: Request, pk: str = None) -> Response:
        qs = ShipAssignmentService.ships_for_person(request.user, pk)
        return Response(ShipAssignmentSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class OrganizationViewSet(viewsets.ViewSet):
    """/api/registry/organizations/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Search organizations",
        parameters=[_SEARCH_PARAM],
        responses={200: OpenApiResponse(response=OrganizationSerializer(many=True))},
        tags=["Organizations"],
    )
    def list(self, request: Request) -> Response:
        qs = OrganizationService.search(request.query_params.get("search"))
        return Response(OrganizationSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Create organization",
        request=OrganizationSerializer,
        responses={201: OpenApiResponse(response=OrganizationSerializer)},
        tags=["Organizations"],
    )
    def create(self, request: Request) -> Response:
        serializer = OrganizationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        organization = OrganizationService.create_organization(serializer.validated_data, request.user)
        return Response(OrganizationSerializer(organization).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve organization",
        responses={200: OpenApiResponse(response=OrganizationSerializer)},
        tags=["Organizations"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        organization = OrganizationService.get_organization(pk)
        return Response(OrganizationSerializer(organization).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update organization",
        request=OrganizationSerializer,
        responses={200: OpenApiResponse(response=OrganizationSerializer)},
        tags=["Organizations"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = OrganizationSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        organization = OrganizationService.update_organization(pk, serializer.validated_data, request.user)
        return Response(OrganizationSerializer(organization).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Crime statistics over active members",
        responses={200: OpenApiResponse(description="crime_type → count")},
        tags=["Organizations"],
    )
    @action(detail=True, methods=["get"], url_path="crime-stats")
    def crime_stats(self, request: Request, pk: str = None) -> Response:
        organization = OrganizationService.get_organization(pk)
        return Response(OrganizationService.crime_stats(organization.pk), status=status.HTTP_200_OK)

    @extend_schema(
        summary="Relationships on either side",
        responses={200: OpenApiResponse(response=OrgRelationshipSerializer(many=True))},
        tags=["Organizations"],
    )
    @action(detail=True, methods=["get"], url_path="relationships")
    def relationships(self, request: Request, pk: str = None) -> Response:
        organization = OrganizationService.get_organization(pk)
        qs = OrganizationService.relationships(organization.pk)
        return Response(OrgRelationshipSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Organization memberships",
        responses={200: OpenApiResponse(response=MembershipSerializer(many=True))},
        tags=["Organizations"],
    )
    @action(detail=True, methods=["get"], url_path="memberships")
    def memberships(self, request: Request, pk: str = None) -> Response:
        organization = OrganizationService.get_organization(pk)
        qs = MembershipService.list_memberships(organization_id=organization.pk)
        return Response(MembershipSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Organization journal",
        request=OrganizationJournalSerializer,
        responses={
            200: OpenApiResponse(response=OrganizationJournalSerializer(many=True)),
            201: OpenApiResponse(response=OrganizationJournalSerializer),
        },
        tags=["Organizations"],
    )
    @action(detail=True, methods=["get", "post"], url_path="journal")
    def journal(self, request: Request, pk: str = None) -> Response:
        if request.method == "POST":
            serializer = OrganizationJournalSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            entry = JournalService.add_entry(pk, serializer.validated_data, request.user)
            return Response(OrganizationJournalSerializer(entry).data, status=status.HTTP_201_CREATED)

        organization = OrganizationService.get_organization(pk)
        qs = JournalService.list_entries(organization.pk)
        return Response(OrganizationJournalSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class MembershipViewSet(viewsets.ViewSet):
    """/api/registry/memberships/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Add membership",
        request=MembershipSerializer,
        responses={201: OpenApiResponse(response=MembershipSerializer)},
        tags=["Memberships"],
    )
    def create(self, request: Request) -> Response:
        serializer = MembershipSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        membership = MembershipService.add_membership(serializer.validated_data, request.user)
        return Response(MembershipSerializer(membership).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Update membership",
        request=MembershipSerializer,
        responses={200: OpenApiResponse(response=MembershipSerializer)},
        tags=["Memberships"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = MembershipSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        membership = MembershipService.update_membership(pk, serializer.validated_data, request.user)
        return Response(MembershipSerializer(membership).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Remove membership",
        responses={204: OpenApiResponse(description="Removed.")},
        tags=["Memberships"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        MembershipService.remove_membership(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrgRelationshipViewSet(viewsets.ViewSet):
    """/api/registry/relationships/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Add organization relationship",
        request=OrgRelationshipSerializer,
        responses={201: OpenApiResponse(response=OrgRelationshipSerializer)},
        tags=["Relationships"],
    )
    def create(self, request: Request) -> Response:
        serializer = OrgRelationshipSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        relationship = OrgRelationshipService.add_relationship(serializer.validated_data, request.user)
        return Response(OrgRelationshipSerializer(relationship).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Update organization relationship",
        request=OrgRelationshipSerializer,
        responses={200: OpenApiResponse(response=OrgRelationshipSerializer)},
        tags=["Relationships"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = OrgRelationshipSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        relationship = OrgRelationshipService.update_relationship(pk, serializer.validated_data, request.user)
        return Response(OrgRelationshipSerializer(relationship).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Remove organization relationship",
        responses={204: OpenApiResponse(description="Removed.")},
        tags=["Relationships"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        OrgRelationshipService.remove_relationship(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class JournalEntryViewSet(viewsets.ViewSet):
    """/api/registry/journal-entries/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Update journal entry",
        request=OrganizationJournalSerializer,
        responses={200: OpenApiResponse(response=OrganizationJournalSerializer)},
        tags=["Organizations"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = OrganizationJournalSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        entry = JournalService.update_entry(pk, serializer.validated_data, request.user)
        return Response(OrganizationJournalSerializer(entry).data, status=status.HTTP_200_OK)


class IncidentViewSet(viewsets.ViewSet):
    """
    /api/registry/incidents/

    Citizens see only the incidents they reported; actors who may search
    persons see all of them.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List incidents",
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="Workflow status."),
            OpenApiParameter(name="person", type=int, location=OpenApiParameter.QUERY, description="Person id."),
            OpenApiParameter(name="min_danger_level", type=int, location=OpenApiParameter.QUERY, description="Lowest danger level (1–6)."),
        ],
        responses={200: OpenApiResponse(response=IncidentSerializer(many=True))},
        tags=["Incidents"],
    )
    def list(self, request: Request) -> Response:
        filters = IncidentFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        qs = IncidentService.list_incidents(request.user, filters.validated_data)
        return Response(IncidentSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Report incident",
        description=(
            "Report an incident against a handle.  Unknown handles get a "
            "new person record automatically."
        ),
        request=IncidentReportSerializer,
        responses={
            201: OpenApiResponse(response=IncidentSerializer),
            403: OpenApiResponse(description="Requires can_report_incidents."),
        },
        tags=["Incidents"],
    )
    def create(self, request: Request) -> Response:
        serializer = IncidentReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        incident = IncidentService.report_incident(reporter=request.user, **serializer.validated_data)
        return Response(IncidentSerializer(incident).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve incident",
        responses={
            200: OpenApiResponse(response=IncidentSerializer),
            404: OpenApiResponse(description="Not found or not visible."),
        },
        tags=["Incidents"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        incident = IncidentService.get_incident(request.user, pk)
        return Response(IncidentSerializer(incident).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Amend incident report",
        request=IncidentUpdateSerializer,
        responses={200: OpenApiResponse(response=IncidentSerializer)},
        tags=["Incidents"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = IncidentUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        incident = IncidentService.update_incident(request.user, pk, serializer.validated_data)
        return Response(IncidentSerializer(incident).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Fleet
# ═══════════════════════════════════════════════════════════════════


class ManufacturerViewSet(viewsets.ViewSet):
    """
    /api/registry/manufacturers/

    The catalogue is readable by every actor; writes need
    ``can_manage_manufacturers``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List manufacturers",
        parameters=[_SEARCH_PARAM],
        responses={200: OpenApiResponse(response=ManufacturerSerializer(many=True))},
        tags=["Fleet"],
    )
    def list(self, request: Request) -> Response:
        qs = ManufacturerService.list_manufacturers(request.query_params.get("search"))
        return Response(ManufacturerSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Create manufacturer",
        request=ManufacturerSerializer,
        responses={
            201: OpenApiResponse(response=ManufacturerSerializer),
            409: OpenApiResponse(description="Name already registered."),
        },
        tags=["Fleet"],
    )
    def create(self, request: Request) -> Response:
        serializer = ManufacturerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        manufacturer = ManufacturerService.create_manufacturer(serializer.validated_data, request.user)
        return Response(ManufacturerSerializer(manufacturer).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve manufacturer",
        responses={200: OpenApiResponse(response=ManufacturerSerializer)},
        tags=["Fleet"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        manufacturer = ManufacturerService.get_manufacturer(pk)
        return Response(ManufacturerSerializer(manufacturer).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update manufacturer",
        request=ManufacturerSerializer,
        responses={200: OpenApiResponse(response=ManufacturerSerializer)},
        tags=["Fleet"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = ManufacturerSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        manufacturer = ManufacturerService.update_manufacturer(pk, serializer.validated_data, request.user)
        return Response(ManufacturerSerializer(manufacturer).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Remove manufacturer and its models",
        responses={204: OpenApiResponse(description="Removed.")},
        tags=["Fleet"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        ManufacturerService.delete_manufacturer(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        summary="Manufacturer ship models",
        responses={200: OpenApiResponse(response=ShipModelSerializer(many=True))},
        tags=["Fleet"],
    )
    @action(detail=True, methods=["get"], url_path="models")
    def ship_models(self, request: Request, pk: str = None) -> Response:
        manufacturer = ManufacturerService.get_manufacturer(pk)
        qs = ShipModelService.list_models(manufacturer_id=manufacturer.pk)
        return Response(ShipModelSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class ShipModelViewSet(viewsets.ViewSet):
    """/api/registry/ship-models/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List ship models",
        parameters=[
            OpenApiParameter(name="manufacturer", type=int, location=OpenApiParameter.QUERY, description="Manufacturer id."),
        ],
        responses={200: OpenApiResponse(response=ShipModelSerializer(many=True))},
        tags=["Fleet"],
    )
    def list(self, request: Request) -> Response:
        filters = ShipModelFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        qs = ShipModelService.list_models(filters.validated_data.get("manufacturer"))
        return Response(ShipModelSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Create ship model",
        request=ShipModelSerializer,
        responses={201: OpenApiResponse(response=ShipModelSerializer)},
        tags=["Fleet"],
    )
    def create(self, request: Request) -> Response:
        serializer = ShipModelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ship_model = ShipModelService.create_model(serializer.validated_data, request.user)
        return Response(ShipModelSerializer(ship_model).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Update ship model",
        request=ShipModelSerializer,
        responses={200: OpenApiResponse(response=ShipModelSerializer)},
        tags=["Fleet"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = ShipModelSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        ship_model = ShipModelService.update_model(pk, serializer.validated_data, request.user)
        return Response(ShipModelSerializer(ship_model).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Remove ship model",
        responses={204: OpenApiResponse(description="Removed.")},
        tags=["Fleet"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        ShipModelService.delete_model(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ShipViewSet(viewsets.ViewSet):
    """
    /api/registry/ships/

    Readable by actors who may search persons; writes need
    ``can_manage_ships``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Search ships",
        parameters=[
            _SEARCH_PARAM,
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="Ship status."),
        ],
        responses={200: OpenApiResponse(response=ShipSerializer(many=True))},
        tags=["Fleet"],
    )
    def list(self, request: Request) -> Response:
        filters = ShipFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        qs = ShipService.search(
            request.user,
            filters.validated_data.get("search"),
            filters.validated_data.get("status"),
        )
        return Response(ShipSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Register ship",
        request=ShipSerializer,
        responses={
            201: OpenApiResponse(response=ShipSerializer),
            409: OpenApiResponse(description="Serial number already registered."),
        },
        tags=["Fleet"],
    )
    def create(self, request: Request) -> Response:
        serializer = ShipSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ship = ShipService.create_ship(serializer.validated_data, request.user)
        return Response(ShipSerializer(ship).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve ship",
        responses={200: OpenApiResponse(response=ShipSerializer)},
        tags=["Fleet"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        ship = ShipService.get_ship(request.user, pk)
        return Response(ShipSerializer(ship).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update ship",
        request=ShipSerializer,
        responses={200: OpenApiResponse(response=ShipSerializer)},
        tags=["Fleet"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = ShipSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        ship = ShipService.update_ship(pk, serializer.validated_data, request.user)
        return Response(ShipSerializer(ship).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Remove ship with its crew and journal",
        responses={204: OpenApiResponse(description="Removed.")},
        tags=["Fleet"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        ShipService.delete_ship(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        summary="Ship crew",
        request=ShipAssignmentSerializer,
        responses={
            200: OpenApiResponse(response=ShipAssignmentSerializer(many=True)),
            201: OpenApiResponse(response=ShipAssignmentSerializer),
            409: OpenApiResponse(description="Person already aboard."),
        },
        tags=["Fleet"],
    )
    @action(detail=True, methods=["get", "post"], url_path="crew")
    def crew(self, request: Request, pk: str = None) -> Response:
        if request.method == "POST":
            serializer = ShipAssignmentSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            assignment = ShipAssignmentService.assign(pk, serializer.validated_data, request.user)
            return Response(ShipAssignmentSerializer(assignment).data, status=status.HTTP_201_CREATED)

        qs = ShipAssignmentService.crew_for_ship(request.user, pk)
        return Response(ShipAssignmentSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Ship journal",
        request=ShipJournalSerializer,
        responses={
            200: OpenApiResponse(response=ShipJournalSerializer(many=True)),
            201: OpenApiResponse(response=ShipJournalSerializer),
        },
        tags=["Fleet"],
    )
    @action(detail=True, methods=["get", "post"], url_path="journal")
    def journal(self, request: Request, pk: str = None) -> Response:
        if request.method == "POST":
            serializer = ShipJournalSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            entry = ShipJournalService.add_entry(pk, serializer.validated_data, request.user)
            return Response(ShipJournalSerializer(entry).data, status=status.HTTP_201_CREATED)

        qs = ShipJournalService.list_entries(request.user, pk)
        return Response(ShipJournalSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class ShipAssignmentViewSet(viewsets.ViewSet):
    """/api/registry/ship-assignments/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Remove crew assignment",
        responses={204: OpenApiResponse(description="Removed.")},
        tags=["Fleet"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        ShipAssignmentService.remove_assignment(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ShipJournalEntryViewSet(viewsets.ViewSet):
    """/api/registry/ship-journal-entries/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Update ship journal entry",
        request=ShipJournalSerializer,
        responses={200: OpenApiResponse(response=ShipJournalSerializer)},
        tags=["Fleet"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = ShipJournalSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        entry = ShipJournalService.update_entry(pk, serializer.validated_data, request.user)
        return Response(ShipJournalSerializer(entry).data, status=status.HTTP_200_OK)
