import pytest
from django.urls import reverse
from rest_framework import status


@pytest.mark.django_db
class TestMachineDirectory:
    """Tests for GET /api/machines/"""

    def test_list_machines(self, authenticated_client, machine, offline_machine):
        response = authenticated_client.get(reverse('machines:machine-list'))

        assert response.status_code == status.HTTP_200_OK
        assert {m['id'] for m in response.data} == {'m1', 'm2'}

    def test_filter_by_status(self, authenticated_client, machine, offline_machine):
        response = authenticated_client.get(
            reverse('machines:machine-list'), {'status': 'offline'}
        )

        assert [m['id'] for m in response.data] == ['m2']

    def test_filter_accepting(self, authenticated_client, machine, offline_machine, full_machine):
        response = authenticated_client.get(
            reverse('machines:machine-list'), {'accepting': 'true'}
        )

        assert [m['id'] for m in response.data] == ['m1']
        assert response.data[0]['accepts_postings'] is True

    def test_retrieve_machine(self, authenticated_client, full_machine):
        response = authenticated_client.get(
            reverse('machines:machine-detail', args=[full_machine.id])
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['stock_level'] == 90
        assert response.data['accepts_postings'] is False

    def test_directory_is_read_only(self, ngo_client, machine):
        response = ngo_client.delete(reverse('machines:machine-detail', args=[machine.id]))

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_requires_authentication(self, api_client, machine):
        response = api_client.get(reverse('machines:machine-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
