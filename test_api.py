#!/usr/bin/env python3
"""
Tests for the HTTP API.
"""

import unittest
import tempfile
import os
import shutil

from fastapi.testclient import TestClient

from api.app import create_app


class TestApi(unittest.TestCase):
    """Test cases for routes and error mapping."""

    def setUp(self):
        """Set up an app on a temporary database with seeded profiles."""
        self.test_dir = tempfile.mkdtemp()
        app = create_app(os.path.join(self.test_dir, "missing.yaml"),
                         os.path.join(self.test_dir, "test_api.db"))
        self.client = TestClient(app)

        profiles = app.state.services.profiles
        profiles.save_profile('org1', {'name': 'Organizer', 'role': 'organizer'})
        profiles.save_profile('admin1', {'name': 'Admin', 'role': 'admin'})
        profiles.save_profile('athlete1', {'name': 'Athlete1', 'team': 'K9 Rescue'})
        profiles.save_dogs('athlete1', [{'id': 'dog1', 'name': 'Dog1', 'birth': '2020-01-01'}])

    def tearDown(self):
        """Clean up test fixtures."""
        self.client.close()
        shutil.rmtree(self.test_dir)

    def _as(self, user_id):
        return {'X-User-Id': user_id}

    def _create_competition(self, **fields):
        payload = {'name': 'Spring Trial', 'categories': ['RH-FL-B'], 'status': 'registration_open'}
        payload.update(fields)
        response = self.client.post('/competitions', json=payload, headers=self._as('org1'))
        self.assertEqual(response.status_code, 200)
        return response.json()

    def _register(self, competition_id, category='RH-FL-B'):
        return self.client.post(f'/competitions/{competition_id}/register',
                                json={'dogId': 'dog1', 'category': category},
                                headers=self._as('athlete1'))

    def test_health(self):
        """Test the health endpoint."""
        self.assertEqual(self.client.get('/health').json(), {'status': 'ok'})

    def test_create_and_list_competitions(self):
        """Test competition creation and listing."""
        competition = self._create_competition(date='2024-04-20')

        self.assertEqual(competition['organizerId'], 'org1')
        self.assertEqual(competition['categories'], ['rh-fl-b'])
        self.assertEqual(competition['startDate'], '2024-04-20')

        listed = self.client.get('/competitions').json()
        self.assertEqual([c['id'] for c in listed], [competition['id']])

    def test_authentication_and_roles(self):
        """Test 401 without a user and 403 for plain users."""
        response = self.client.post('/competitions', json={'name': 'Trial'})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'error': 'Unauthorized'})

        response = self.client.post('/competitions', json={'name': 'Trial'}, headers=self._as('athlete1'))
        self.assertEqual(response.status_code, 403)
        self.assertIn('error', response.json())

    def test_registration_errors(self):
        """Test status codes of registration failures."""
        competition = self._create_competition()

        self.assertEqual(self._register(competition['id']).json(), {'success': True})

        duplicate = self._register(competition['id'])
        self.assertEqual(duplicate.status_code, 409)
        self.assertEqual(duplicate.json(), {'error': 'This dog is already registered in this category'})

        self.assertEqual(self._register(competition['id'], 'RH-W-A').status_code, 400)
        self.assertEqual(self._register('missing').status_code, 404)

        response = self.client.post(f"/competitions/{competition['id']}/register",
                                    json={'dogId': 'dog1'}, headers=self._as('athlete1'))
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.json())

    def test_registration_closed(self):
        """Test registration into a planned competition."""
        competition = self._create_competition(status='planned')
        response = self._register(competition['id'])
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json(), {'error': 'Registration closed'})

    def test_review_flow(self):
        """Test confirm, score, place, publish and rate through the API."""
        competition = self._create_competition()
        competition_id = competition['id']
        self._register(competition_id)

        registrations = self.client.get('/profile/registrations', headers=self._as('athlete1')).json()
        participant_id = registrations[0]['participantId']
        self.assertEqual(registrations[0]['status'], 'registered')

        response = self.client.put(f'/competitions/{competition_id}/participants',
                                   json={'participantId': participant_id, 'status': 'confirmed'},
                                   headers=self._as('org1'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'confirmed')

        response = self.client.put(f'/competitions/{competition_id}/participants',
                                   json={'participantId': participant_id,
                                         'results': {'search': 150, 'obedience': '135'}},
                                   headers=self._as('org1'))
        self.assertEqual(response.json()['results']['total'], 285)
        self.assertEqual(response.json()['results']['qualification'], 'Very good')

        placed = self.client.post(f'/competitions/{competition_id}/placements', headers=self._as('org1')).json()
        self.assertEqual(placed[0]['results']['place'], 1)

        results = self.client.get(f'/competitions/{competition_id}/results').json()
        self.assertEqual(results['groups'][0]['withResults'][0]['dogName'], 'Dog1')

        protocol = self.client.get(f'/competitions/{competition_id}/protocol', headers=self._as('org1'))
        self.assertEqual(protocol.status_code, 200)
        self.assertIn('Athlete1', protocol.text)

        self.client.put(f'/competitions/{competition_id}', json={'status': 'completed', 'level': 'Відбіркові'},
                        headers=self._as('org1'))
        rating = self.client.get('/rating', params={'discipline': 'RH-FL-B'}).json()
        self.assertEqual(rating, [{'athlete': 'Athlete1', 'dog': 'Dog1', 'team': 'K9 Rescue',
                                   'score': 285, 'competitions': 1, 'place': 1}])

    def test_reject_needs_reason(self):
        """Test rejection with and without a reason."""
        competition_id = self._create_competition()['id']
        self._register(competition_id)

        body = {'userId': 'athlete1', 'dogId': 'dog1', 'category': 'rh-fl-b', 'status': 'rejected'}
        response = self.client.put(f'/competitions/{competition_id}/participants', json=body,
                                   headers=self._as('org1'))
        self.assertEqual(response.status_code, 400)

        body['results'] = {'notes': 'Missing documents'}
        response = self.client.put(f'/competitions/{competition_id}/participants', json=body,
                                   headers=self._as('org1'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['results']['notes'], 'Missing documents')

        registrations = self.client.get('/profile/registrations', headers=self._as('athlete1')).json()
        self.assertEqual(registrations[0]['notes'], 'Missing documents')

    def test_batch_save(self):
        """Test batch save with a missing participant."""
        competition_id = self._create_competition()['id']
        self._register(competition_id)
        participant_id = self.client.get('/profile/registrations',
                                         headers=self._as('athlete1')).json()[0]['participantId']

        response = self.client.post(f'/competitions/{competition_id}/participants/save', json={
            'participants': [
                {'participantId': participant_id, 'status': 'confirmed', 'results': {'search': 100}},
                {'participantId': 'ghost', 'status': 'confirmed'}
            ]
        }, headers=self._as('org1'))

        report = response.json()
        self.assertFalse(report['success'])
        self.assertEqual(report['saved'], [participant_id])
        self.assertIn('ghost', report['failed'])

    def test_details_and_delete_permissions(self):
        """Test organizer-only views and deletion."""
        competition_id = self._create_competition()['id']

        self.assertEqual(self.client.get(f'/competitions/{competition_id}/details',
                                         headers=self._as('athlete1')).status_code, 403)
        self.assertEqual(self.client.get(f'/competitions/{competition_id}/details',
                                         headers=self._as('org1')).status_code, 200)
        self.assertEqual(self.client.delete(f'/competitions/{competition_id}',
                                            headers=self._as('athlete1')).status_code, 403)

        response = self.client.delete(f'/competitions/{competition_id}', headers=self._as('admin1'))
        self.assertEqual(response.json(), {'success': True})
        self.assertEqual(self.client.get(f'/competitions/{competition_id}/results').status_code, 404)

    def test_rating_requires_discipline(self):
        """Test the rating query parameter."""
        self.assertEqual(self.client.get('/rating').status_code, 400)
        self.assertEqual(self.client.get('/rating', params={'discipline': 'RH-FL-B'}).json(), [])


if __name__ == '__main__':
    unittest.main()
