#!/usr/bin/env python3
"""
Tests for registering dogs into competition classes.
"""

import unittest
import tempfile
import os
import shutil

from database.database_manager import DatabaseManager
from database.competition_repository import CompetitionRepository
from database.profile_repository import ProfileRepository
from models.actor import Actor
from models.competition import Competition
from models.errors import (CompetitionFull, CompetitionNotFound, DogNotFound,
                           DuplicateRegistration, InvalidCategory, RegistrationClosed)
from registration.registration_manager import RegistrationManager


class TestRegistration(unittest.TestCase):
    """Test cases for competition registration."""

    def setUp(self):
        """Set up a competition open for registration and one athlete with two dogs."""
        self.test_dir = tempfile.mkdtemp()
        self.db = DatabaseManager(os.path.join(self.test_dir, "test_registration.db"),
                                  os.path.join(self.test_dir, "missing.yaml"))
        self.repository = CompetitionRepository(self.db)
        self.manager = RegistrationManager(self.db)

        profiles = ProfileRepository(self.db)
        profiles.save_profile('athlete1', {'name': 'Athlete1'})
        profiles.save_dogs('athlete1', [
            {'id': 'dog1', 'name': 'Dog1', 'birth': '2020-01-01'},
            {'id': 'dog2', 'name': 'Dog2', 'birth': '2021-06-15'}
        ])
        self.athlete = Actor('athlete1')

        self.repository.create(Competition(
            id='comp1',
            name='Spring Trial',
            organizer_id='org1',
            status='registration_open',
            location='Львів',
            start_date='2024-04-20',
            categories=['RH-FL-B', 'RH-T-B']
        ))

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir)

    def _set_status(self, status):
        self.repository.mutate('comp1', lambda c: setattr(c, 'status', status))

    def test_register_appends_participant(self):
        """Test a successful registration."""
        participant = self.manager.register('comp1', self.athlete, 'dog1', 'RH-FL-B',
                                            handler_name='  Handler One ', documents=['vaccination.pdf'])

        self.assertTrue(participant.id)
        self.assertEqual(participant.status, 'registered')
        self.assertEqual(participant.class_name, 'RH-FL-B')
        self.assertEqual(participant.handler_name, 'Handler One')
        self.assertTrue(participant.date)

        stored = self.repository.get('comp1').participants
        self.assertEqual(len(stored), 1)
        self.assertEqual(stored[0].id, participant.id)
        self.assertEqual(stored[0].documents, ['vaccination.pdf'])

    def test_class_is_matched_to_declared_label(self):
        """Test that the class is matched case-insensitively and after normalization."""
        participant = self.manager.register('comp1', self.athlete, 'dog1', 'rh-fl-b')
        self.assertEqual(participant.class_name, 'RH-FL-B')

        participant = self.manager.register('comp1', self.athlete, 'dog2', 'rh-t-v')
        self.assertEqual(participant.class_name, 'RH-T-B')

    def test_duplicate_registration_rejected(self):
        """Test that one dog holds one active application per class."""
        self.manager.register('comp1', self.athlete, 'dog1', 'RH-FL-B')

        with self.assertRaises(DuplicateRegistration):
            self.manager.register('comp1', self.athlete, 'dog1', 'rh-fl-b')

        # Confirmation does not change that
        self.repository.mutate('comp1', lambda c: setattr(c.participants[0], 'status', 'confirmed'))
        with self.assertRaises(DuplicateRegistration):
            self.manager.register('comp1', self.athlete, 'dog1', 'RH-FL-B')

        self.assertEqual(len(self.repository.get('comp1').participants), 1)

    def test_reregistration_after_rejection(self):
        """Test that a rejected application does not block a new one."""
        self.manager.register('comp1', self.athlete, 'dog1', 'RH-FL-B')
        self.repository.mutate('comp1', lambda c: setattr(c.participants[0], 'status', 'rejected'))

        participant = self.manager.register('comp1', self.athlete, 'dog1', 'RH-FL-B')

        stored = self.repository.get('comp1').participants
        self.assertEqual([p.status for p in stored], ['rejected', 'registered'])
        self.assertEqual(stored[1].id, participant.id)

    def test_same_dog_in_different_classes(self):
        """Test that one dog may enter several classes."""
        self.manager.register('comp1', self.athlete, 'dog1', 'RH-FL-B')
        self.manager.register('comp1', self.athlete, 'dog1', 'RH-T-B')

        classes = [p.class_name for p in self.repository.get('comp1').participants]
        self.assertEqual(classes, ['RH-FL-B', 'RH-T-B'])

    def test_registration_closed(self):
        """Test that only competitions open for registration accept applications."""
        for status in ('planned', 'registration_closed', 'completed'):
            self._set_status(status)
            with self.assertRaises(RegistrationClosed):
                self.manager.register('comp1', self.athlete, 'dog1', 'RH-FL-B')

        self.assertEqual(self.repository.get('comp1').participants, [])

    def test_unknown_competition(self):
        """Test registration into a competition that does not exist."""
        with self.assertRaises(CompetitionNotFound):
            self.manager.register('nope', self.athlete, 'dog1', 'RH-FL-B')

    def test_unknown_competition_reported_first(self):
        """Test that a missing competition wins over a missing dog."""
        with self.assertRaises(CompetitionNotFound):
            self.manager.register('nope', self.athlete, 'dog9', 'RH-FL-B')
        with self.assertRaises(CompetitionNotFound):
            self.manager.register('nope', Actor('stranger'), '', '')

    def test_class_not_offered(self):
        """Test registration into a class the competition does not declare."""
        with self.assertRaises(InvalidCategory):
            self.manager.register('comp1', self.athlete, 'dog1', 'RH-W-A')
        with self.assertRaises(InvalidCategory):
            self.manager.register('comp1', self.athlete, 'dog1', '   ')

    def test_any_class_without_declared_categories(self):
        """Test that a competition without categories accepts any class."""
        self.repository.mutate('comp1', lambda c: setattr(c, 'categories', []))
        participant = self.manager.register('comp1', self.athlete, 'dog1', 'RH-W-A')
        self.assertEqual(participant.class_name, 'RH-W-A')

    def test_unknown_dog(self):
        """Test registration of a dog the user does not own."""
        with self.assertRaises(DogNotFound):
            self.manager.register('comp1', self.athlete, 'dog9', 'RH-FL-B')
        with self.assertRaises(DogNotFound):
            self.manager.register('comp1', Actor('stranger'), 'dog1', 'RH-FL-B')

    def test_capacity_limit(self):
        """Test that active participants are limited by maxParticipants."""
        self.repository.mutate('comp1', lambda c: setattr(c, 'max_participants', 1))
        self.manager.register('comp1', self.athlete, 'dog1', 'RH-FL-B')

        with self.assertRaises(CompetitionFull):
            self.manager.register('comp1', self.athlete, 'dog2', 'RH-FL-B')

        # Rejected applications free their slot
        self.repository.mutate('comp1', lambda c: setattr(c.participants[0], 'status', 'rejected'))
        self.manager.register('comp1', self.athlete, 'dog2', 'RH-FL-B')

    def test_list_registrations(self):
        """Test the athlete's own registration list."""
        participant = self.manager.register('comp1', self.athlete, 'dog1', 'RH-FL-B')
        registrations = self.manager.list_registrations(self.athlete)

        self.assertEqual(len(registrations), 1)
        registration = registrations[0]
        self.assertEqual(registration['competitionId'], 'comp1')
        self.assertEqual(registration['competitionName'], 'Spring Trial')
        self.assertEqual(registration['participantId'], participant.id)
        self.assertEqual(registration['dogName'], 'Dog1')
        self.assertEqual(registration['category'], 'RH-FL-B')
        self.assertEqual(registration['status'], 'registered')
        self.assertEqual(registration['location'], 'Львів')

        self.assertEqual(self.manager.list_registrations(Actor('someone')), [])


if __name__ == '__main__':
    unittest.main()
