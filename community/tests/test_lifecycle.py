from unittest import mock
from datetime import datetime, timezone as dt_timezone

from django.test import TestCase

from ..exceptions import Conflict, InvalidState, InvalidTransition, NotFound, Unauthorized, ValidationFailed
from ..models import DeliveryProof, Donation, User
from ..services.lifecycle import DonationLifecycle, next_status
from .factories import donation_data, make_donation, make_user

Status = Donation.DonationStatus
FIXED_NOW = datetime(2025, 3, 14, 9, 30, tzinfo=dt_timezone.utc)


class TransitionTests(TestCase):
    def setUp(self):
        self.lifecycle = DonationLifecycle(clock=lambda: FIXED_NOW)
        self.donor = make_user('donor')
        self.volunteer = make_user('vol', User.UserType.VOLUNTEER)
        self.other_volunteer = make_user('vol2', User.UserType.VOLUNTEER)
        self.donation = make_donation(self.donor)

    def test_next_status_follows_fixed_order(self):
        self.assertEqual(next_status(Status.PENDING), Status.ACCEPTED)
        self.assertEqual(next_status(Status.ACCEPTED), Status.IN_TRANSIT)
        self.assertEqual(next_status(Status.IN_TRANSIT), Status.DELIVERED)
        self.assertIsNone(next_status(Status.DELIVERED))

    def test_full_lifecycle_sets_server_timestamps(self):
        donation = self.lifecycle.apply_transition(self.donation.pk, self.volunteer, Status.ACCEPTED)
        self.assertEqual(donation.status, Status.ACCEPTED)
        self.assertEqual(donation.volunteer, self.volunteer)
        self.assertIsNone(donation.picked_up_at)

        donation = self.lifecycle.apply_transition(self.donation.pk, self.volunteer, Status.IN_TRANSIT)
        self.assertEqual(donation.picked_up_at, FIXED_NOW)
        self.assertIsNone(donation.delivered_at)

        donation = self.lifecycle.apply_transition(self.donation.pk, self.volunteer, Status.DELIVERED)
        self.assertEqual(donation.status, Status.DELIVERED)
        self.assertEqual(donation.delivered_at, FIXED_NOW)
        self.assertEqual(donation.volunteer_id, self.volunteer.pk)

    def test_skipping_a_state_is_rejected(self):
        with self.assertRaises(InvalidTransition) as ctx:
            self.lifecycle.apply_transition(self.donation.pk, self.volunteer, Status.IN_TRANSIT)
        self.assertEqual(ctx.exception.current, Status.PENDING)
        self.assertEqual(ctx.exception.requested, Status.IN_TRANSIT)

    def test_backward_and_repeated_moves_are_rejected(self):
        self.lifecycle.apply_transition(self.donation.pk, self.volunteer, Status.ACCEPTED)
        for target in (Status.PENDING, Status.ACCEPTED, Status.DELIVERED, 'cancelled'):
            with self.assertRaises(InvalidTransition):
                self.lifecycle.apply_transition(self.donation.pk, self.volunteer, target)

    def test_delivered_is_terminal(self):
        donation = make_donation(self.donor, Status.DELIVERED, volunteer=self.volunteer)
        with self.assertRaises(InvalidTransition):
            self.lifecycle.apply_transition(donation.pk, self.volunteer, Status.PENDING)

    def test_unknown_donation(self):
        with self.assertRaises(NotFound):
            self.lifecycle.apply_transition(999999, self.volunteer, Status.ACCEPTED)

    def test_only_volunteers_accept(self):
        other_donor = make_user('other_donor')
        with self.assertRaises(Unauthorized):
            self.lifecycle.apply_transition(self.donation.pk, other_donor, Status.ACCEPTED)
        self.donation.refresh_from_db()
        self.assertEqual(self.donation.status, Status.PENDING)

    def test_donor_cannot_accept_own_donation(self):
        self.donor.user_type = User.UserType.VOLUNTEER
        self.donor.save()
        with self.assertRaises(Unauthorized):
            self.lifecycle.apply_transition(self.donation.pk, self.donor, Status.ACCEPTED)

    def test_only_assigned_volunteer_advances(self):
        self.lifecycle.apply_transition(self.donation.pk, self.volunteer, Status.ACCEPTED)
        with self.assertRaises(Unauthorized):
            self.lifecycle.apply_transition(self.donation.pk, self.other_volunteer, Status.IN_TRANSIT)
        with self.assertRaises(Unauthorized):
            self.lifecycle.apply_transition(self.donation.pk, self.donor, Status.IN_TRANSIT)

    def test_concurrent_accept_has_exactly_one_winner(self):
        first_view = Donation.objects.get(pk=self.donation.pk)
        second_view = Donation.objects.get(pk=self.donation.pk)

        self.lifecycle.transition(first_view, self.volunteer, Status.ACCEPTED)
        with self.assertRaises(Conflict) as ctx:
            self.lifecycle.transition(second_view, self.other_volunteer, Status.ACCEPTED)

        self.assertTrue(ctx.exception.retryable)
        self.donation.refresh_from_db()
        self.assertEqual(self.donation.status, Status.ACCEPTED)
        self.assertEqual(self.donation.volunteer_id, self.volunteer.pk)

    def test_stale_pickup_conflicts(self):
        self.lifecycle.apply_transition(self.donation.pk, self.volunteer, Status.ACCEPTED)
        stale = Donation.objects.get(pk=self.donation.pk)
        self.lifecycle.apply_transition(self.donation.pk, self.volunteer, Status.IN_TRANSIT)
        with self.assertRaises(Conflict):
            self.lifecycle.transition(stale, self.volunteer, Status.IN_TRANSIT)


class DeleteDonationTests(TestCase):
    def setUp(self):
        self.lifecycle = DonationLifecycle()
        self.donor = make_user('donor')
        self.volunteer = make_user('vol', User.UserType.VOLUNTEER)

    def test_owner_deletes_pending_donation(self):
        donation = make_donation(self.donor)
        self.lifecycle.delete_donation(donation.pk, self.donor)
        self.assertFalse(Donation.objects.filter(pk=donation.pk).exists())

    def test_accepted_donation_cannot_be_deleted(self):
        donation = make_donation(self.donor, Status.ACCEPTED, volunteer=self.volunteer)
        with self.assertRaises(InvalidState):
            self.lifecycle.delete_donation(donation.pk, self.donor)
        self.assertTrue(Donation.objects.filter(pk=donation.pk).exists())

    def test_non_owner_cannot_delete(self):
        donation = make_donation(self.donor)
        with self.assertRaises(Unauthorized):
            self.lifecycle.delete_donation(donation.pk, make_user('stranger'))

    def test_anonymous_donation_has_no_owner(self):
        donation = make_donation(None)
        with self.assertRaises(Unauthorized):
            self.lifecycle.delete_donation(donation.pk, self.donor)

    def test_delete_loses_race_with_accept(self):
        donation = make_donation(self.donor)
        stale = Donation.objects.get(pk=donation.pk)
        Donation.objects.filter(pk=donation.pk).update(status=Status.ACCEPTED, volunteer=self.volunteer)
        with mock.patch('community.services.lifecycle.get_donation', return_value=stale):
            with self.assertRaises(Conflict):
                self.lifecycle.delete_donation(donation.pk, self.donor)
        self.assertTrue(Donation.objects.filter(pk=donation.pk).exists())


class CreateAndUpdateTests(TestCase):
    def setUp(self):
        self.lifecycle = DonationLifecycle()
        self.donor = make_user('donor')

    def test_create_forces_pending_status(self):
        donation = self.lifecycle.create_donation(self.donor, donation_data(status='delivered'))
        self.assertEqual(donation.status, Status.PENDING)
        self.assertEqual(donation.donor, self.donor)
        self.assertIsNone(donation.volunteer)

    def test_anonymous_create(self):
        donation = self.lifecycle.create_donation(None, donation_data())
        self.assertIsNone(donation.donor)

    def test_urgency_defaults_to_normal(self):
        data = donation_data()
        del data['urgency']
        donation = self.lifecycle.create_donation(self.donor, data)
        self.assertEqual(donation.urgency, Donation.Urgency.NORMAL)

    def test_volunteers_cannot_post(self):
        volunteer = make_user('vol', User.UserType.VOLUNTEER)
        with self.assertRaises(Unauthorized):
            self.lifecycle.create_donation(volunteer, donation_data())

    def test_create_validates_input(self):
        with self.assertRaises(ValidationFailed) as ctx:
            self.lifecycle.create_donation(self.donor, donation_data(title='ab', pickup_city='X'))
        self.assertIn('title', ctx.exception.errors)
        self.assertIn('pickup_city', ctx.exception.errors)
        self.assertEqual(Donation.objects.count(), 0)

    def test_update_pending_donation(self):
        donation = make_donation(self.donor)
        updated = self.lifecycle.update_donation(donation.pk, self.donor, {'title': 'Whole wheat bread', 'quantity': '8'})
        self.assertEqual(updated.title, 'Whole wheat bread')
        self.assertEqual(updated.quantity, '8')
        self.assertEqual(updated.pickup_city, 'Kolkata')

    def test_update_ignores_lifecycle_fields(self):
        donation = make_donation(self.donor)
        updated = self.lifecycle.update_donation(donation.pk, self.donor, {'status': 'delivered', 'donor': 99})
        self.assertEqual(updated.status, Status.PENDING)
        self.assertEqual(updated.donor, self.donor)

    def test_update_non_pending_fails(self):
        volunteer = make_user('vol', User.UserType.VOLUNTEER)
        donation = make_donation(self.donor, Status.ACCEPTED, volunteer=volunteer)
        with self.assertRaises(InvalidState):
            self.lifecycle.update_donation(donation.pk, self.donor, {'title': 'Changed title'})


class CollaboratorHookTests(TestCase):
    def setUp(self):
        self.lifecycle = DonationLifecycle()
        self.donor = make_user('donor')
        self.volunteer = make_user('vol', User.UserType.VOLUNTEER)

    def test_chat_counterpart(self):
        donation = make_donation(self.donor, Status.ACCEPTED, volunteer=self.volunteer)
        self.assertEqual(self.lifecycle.chat_counterpart(donation.pk, self.donor), self.volunteer.pk)
        self.assertEqual(self.lifecycle.chat_counterpart(donation.pk, self.volunteer), self.donor.pk)
        with self.assertRaises(Unauthorized):
            self.lifecycle.chat_counterpart(donation.pk, make_user('stranger'))

    def test_chat_counterpart_before_acceptance(self):
        donation = make_donation(self.donor)
        self.assertIsNone(self.lifecycle.chat_counterpart(donation.pk, self.donor))

    def test_assigned_volunteer_adds_proof(self):
        donation = make_donation(self.donor, Status.IN_TRANSIT, volunteer=self.volunteer)
        proof = self.lifecycle.add_delivery_proof(
            donation.pk, self.volunteer, {'image_url': 'https://cdn.example.com/p/1.jpg', 'proof_type': 'before'}
        )
        self.assertEqual(proof.proof_type, DeliveryProof.ProofType.BEFORE)
        self.assertEqual(donation.proofs.count(), 1)

    def test_proof_requires_assigned_volunteer(self):
        donation = make_donation(self.donor)
        with self.assertRaises(Unauthorized):
            self.lifecycle.add_delivery_proof(donation.pk, self.volunteer, {'image_url': 'https://cdn.example.com/x.jpg'})

    def test_proof_type_must_be_known(self):
        donation = make_donation(self.donor, Status.ACCEPTED, volunteer=self.volunteer)
        with self.assertRaises(ValidationFailed):
            self.lifecycle.add_delivery_proof(
                donation.pk, self.volunteer, {'image_url': 'https://cdn.example.com/x.jpg', 'proof_type': 'during'}
            )
