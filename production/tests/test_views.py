"""
Tests — Production ledger API endpoints.

@file production/tests/test_views.py
"""

import pytest
from django.urls import reverse
from rest_framework import status

from core.constants import MAX_QUANTITY
from production.models import Expenditure, ProductionData
from tests.factories import ExpenditureFactory, ProductionDataFactory, UserFactory


pytestmark = pytest.mark.django_db

LIST_URL = 'api-v1:production:data-list'
DETAIL_URL = 'api-v1:production:data-detail'


def _detail(pk):
    return reverse(DETAIL_URL, kwargs={'pk': pk})


class TestAuthentication:

    def test_list_requires_auth(self, api_client):
        response = api_client.get(reverse(LIST_URL))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        body = response.json()
        assert body['success'] is False
        assert body['error']['code'] == 'NOT_AUTHENTICATED'

    def test_login_returns_token_pair(self, api_client):
        UserFactory(username='grower', password='Bananas2026!')
        response = api_client.post(
            reverse('api-v1:auth-login'),
            {'username': 'grower', 'password': 'Bananas2026!'},
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()['data']
        assert 'access' in data
        assert 'refresh' in data

    def test_bearer_token_grants_access(self, api_client):
        UserFactory(username='grower', password='Bananas2026!')
        tokens = api_client.post(
            reverse('api-v1:auth-login'),
            {'username': 'grower', 'password': 'Bananas2026!'},
            format='json',
        ).json()['data']
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {tokens["access"]}')
        assert api_client.get(reverse(LIST_URL)).status_code == status.HTTP_200_OK


class TestCreate:

    def test_create_with_expenditures(self, authenticated_client):
        response = authenticated_client.post(
            reverse(LIST_URL),
            {
                'date': '2024-01-01',
                'purchased': 20,
                'produced': 100,
                'sales': 50,
                'expenditures': [{'name': 'Transport', 'amount': 500}],
            },
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body['success'] is True
        assert body['message'] == 'Production data created successfully.'
        data = body['data']
        assert data['date'] == '2024-01-01'
        assert data['stock'] == 100
        assert data['remains'] == 50
        assert data['expenditures'][0]['name'] == 'Transport'
        assert data['expenditures'][0]['amount'] == 500
        assert 'id' in data['expenditures'][0]

    def test_timestamp_is_normalised_to_utc_day(self, authenticated_client):
        response = authenticated_client.post(
            reverse(LIST_URL),
            {'date': '2024-03-10T23:30:00-02:00', 'produced': 1},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()['data']['date'] == '2024-03-11'

    def test_space_separated_timestamp_is_accepted(self, authenticated_client):
        response = authenticated_client.post(
            reverse(LIST_URL),
            {'date': '2024-03-10 23:30:00+02:00', 'produced': 1},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()['data']['date'] == '2024-03-10'

    def test_stock_and_remains_are_not_accepted_from_clients(self, authenticated_client):
        response = authenticated_client.post(
            reverse(LIST_URL),
            {'date': '2024-01-01', 'produced': 10, 'stock': 9999, 'remains': 9999},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()['data']['stock'] == 10

    def test_duplicate_date_returns_409(self, authenticated_client):
        ProductionDataFactory(date='2024-01-01')
        response = authenticated_client.post(
            reverse(LIST_URL), {'date': '2024-01-01', 'produced': 5}, format='json',
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()['error']['code'] == 'CONFLICT'
        assert ProductionData.objects.count() == 1

    @pytest.mark.parametrize('payload', [
        {'produced': 5},
        {'date': 'yesterday'},
        {'date': '2024-01-01', 'sales': -1},
        {'date': '2024-01-01', 'expenditures': [{'name': 'Fuel', 'amount': -5}]},
        {'date': '2024-01-01', 'expenditures': [{'amount': 5}]},
        {'date': '2024-01-01', 'produced': 10**20},
        {'date': '2024-01-01', 'purchased': MAX_QUANTITY + 1},
        {'date': '2024-01-01', 'sales': MAX_QUANTITY + 1},
        {'date': '2024-01-01', 'expenditures': [{'name': 'Fuel', 'amount': MAX_QUANTITY + 1}]},
    ])
    def test_invalid_payload_returns_400(self, authenticated_client, payload):
        response = authenticated_client.post(reverse(LIST_URL), payload, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error']['code'] == 'VALIDATION_ERROR'
        assert ProductionData.objects.count() == 0


class TestRetrieve:

    def test_retrieve(self, authenticated_client):
        record = ProductionDataFactory()
        ExpenditureFactory(production=record, name='Labour', amount=40)
        response = authenticated_client.get(_detail(record.pk))
        assert response.status_code == status.HTTP_200_OK
        data = response.json()['data']
        assert data['id'] == record.pk
        assert data['expenditures'] == [
            {'id': record.expenditures.get().pk, 'name': 'Labour', 'amount': 40},
        ]

    def test_retrieve_missing_returns_404(self, authenticated_client):
        response = authenticated_client.get(_detail(424242))
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()['error']['code'] == 'NOT_FOUND'


class TestList:

    def test_list_envelope(self, authenticated_client):
        for day in range(1, 4):
            ProductionDataFactory(date=f'2024-02-0{day}')
        response = authenticated_client.get(reverse(LIST_URL), {'pageSize': 10})
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['success'] is True
        assert [item['date'] for item in body['data']['items']] == [
            '2024-02-03', '2024-02-02', '2024-02-01',
        ]
        assert body['data']['pagination'] == {
            'total': 3,
            'pageCount': 1,
            'currentPage': 1,
            'pageSize': 10,
            'from': 1,
            'to': 3,
        }

    def test_filters_and_sorting(self, authenticated_client):
        for day in range(1, 8):
            ProductionDataFactory(date=f'2024-02-0{day}', sales=10 - day)
        response = authenticated_client.get(reverse(LIST_URL), {
            'startDate': '2024-02-02',
            'endDate': '2024-02-04',
            'sortBy': 'sales',
            'sortOrder': 'asc',
        })
        assert response.status_code == status.HTTP_200_OK
        assert [item['sales'] for item in response.json()['data']['items']] == [6, 7, 8]

    def test_negative_stock_filter_after_update(self, authenticated_client):
        record = ProductionDataFactory(date='2024-02-01', purchased=0, produced=10, sales=0)
        ProductionDataFactory(date='2024-02-02')
        authenticated_client.patch(_detail(record.pk), {'sales': 30}, format='json')

        response = authenticated_client.get(reverse(LIST_URL), {'stock': -20})

        assert response.status_code == status.HTTP_200_OK
        items = response.json()['data']['items']
        assert [(item['id'], item['stock']) for item in items] == [(record.pk, -20)]

    @pytest.mark.parametrize('params', [
        {'pageSize': 5},
        {'pageSize': 501},
        {'page': 0},
        {'sortBy': 'name'},
        {'sortOrder': 'sideways'},
        {'produced': -1},
        {'produced': '4.5'},
        {'stock': 10**20},
        {'startDate': 'soon'},
    ])
    def test_invalid_query_returns_400(self, authenticated_client, params):
        response = authenticated_client.get(reverse(LIST_URL), params)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error']['code'] == 'VALIDATION_ERROR'


class TestUpdate:

    def test_put_is_partial(self, authenticated_client):
        record = ProductionDataFactory(purchased=20, produced=100, sales=50)
        keep = ExpenditureFactory(production=record, name='A', amount=10)
        ExpenditureFactory(production=record, name='B', amount=20)

        response = authenticated_client.put(
            _detail(record.pk),
            {
                'produced': 150,
                'expenditures': [
                    {'id': keep.pk, 'name': 'A', 'amount': 15},
                    {'name': 'C', 'amount': 5},
                ],
            },
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()['data']
        assert data['produced'] == 150
        assert data['sales'] == 50
        assert data['stock'] == 120
        assert data['remains'] == 100
        assert sorted((e['name'], e['amount']) for e in data['expenditures']) == [('A', 15), ('C', 5)]

    def test_patch(self, authenticated_client):
        record = ProductionDataFactory(purchased=0, produced=10, sales=0)
        response = authenticated_client.patch(_detail(record.pk), {'sales': 4}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.json()['data']['remains'] == 6

    def test_duplicate_expenditure_ids_rejected(self, authenticated_client):
        record = ProductionDataFactory()
        row = ExpenditureFactory(production=record)
        response = authenticated_client.put(
            _detail(record.pk),
            {'expenditures': [
                {'id': row.pk, 'name': 'A', 'amount': 1},
                {'id': row.pk, 'name': 'B', 'amount': 2},
            ]},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unstorable_derived_stock_returns_400(self, authenticated_client):
        record = ProductionDataFactory(purchased=0, produced=10, sales=0)
        response = authenticated_client.put(
            _detail(record.pk),
            {'purchased': MAX_QUANTITY, 'produced': MAX_QUANTITY},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error']['code'] == 'VALIDATION_ERROR'
        record.refresh_from_db()
        assert record.produced == 10

    def test_update_missing_returns_404(self, authenticated_client):
        response = authenticated_client.put(_detail(424242), {'sales': 1}, format='json')
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDelete:

    def test_delete_cascades(self, authenticated_client):
        record = ProductionDataFactory()
        ExpenditureFactory.create_batch(2, production=record)
        response = authenticated_client.delete(_detail(record.pk))
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['success'] is True
        assert body['message'] == 'Production data deleted successfully.'
        assert ProductionData.objects.count() == 0
        assert Expenditure.objects.count() == 0

    def test_delete_missing_returns_404(self, authenticated_client):
        response = authenticated_client.delete(_detail(424242))
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestApiRoot:

    def test_root_lists_endpoints(self, api_client):
        response = api_client.get(reverse('api-v1:api-root'))
        assert response.status_code == status.HTTP_200_OK
        assert response.json()['data']['production'].endswith('/api/v1/production/data/')
