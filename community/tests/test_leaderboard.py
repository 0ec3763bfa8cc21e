from django.test import TestCase

from ..models import Donation, User
from ..services.leaderboard import top_n
from .factories import make_donation, make_user

Status = Donation.DonationStatus


class LeaderboardTests(TestCase):
    def setUp(self):
        self.alice = make_user('alice')
        self.bob = make_user('bob')
        self.carol = make_user('carol')
        self.idle = make_user('idle')
        self.vol_a = make_user('vol_a', User.UserType.VOLUNTEER)
        self.vol_b = make_user('vol_b', User.UserType.VOLUNTEER)

        for _ in range(2):
            make_donation(self.bob)
            make_donation(self.alice)
        make_donation(self.carol, Status.DELIVERED, volunteer=self.vol_b)
        make_donation(self.carol, Status.IN_TRANSIT, volunteer=self.vol_a)
        make_donation(self.carol, Status.ACCEPTED, volunteer=self.vol_a)

    def test_donor_board_ties_break_by_id(self):
        leaders = top_n('donor', 3)
        self.assertEqual([entry['user_id'] for entry in leaders], [self.carol.pk, self.alice.pk, self.bob.pk])
        self.assertEqual([entry['count'] for entry in leaders], [3, 2, 2])

    def test_entries_are_ranked(self):
        leaders = top_n('donor', 10)
        self.assertEqual([entry['rank'] for entry in leaders], [1, 2, 3])
        self.assertEqual(leaders[0]['full_name'], 'Carol')

    def test_zero_activity_excluded(self):
        ids = [entry['user_id'] for entry in top_n('donor', 10)]
        self.assertNotIn(self.idle.pk, ids)

    def test_volunteer_board_counts_deliveries_only(self):
        leaders = top_n('volunteer', 3)
        self.assertEqual(leaders, [{'rank': 1, 'user_id': self.vol_b.pk, 'full_name': 'Vol_B', 'count': 1}])

    def test_repeated_calls_identical(self):
        self.assertEqual(top_n('donor', 3), top_n('donor', 3))

    def test_truncation(self):
        self.assertEqual(len(top_n('donor', 1)), 1)
        self.assertEqual(top_n('donor', 0), [])

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            top_n('donor', -1)
        with self.assertRaises(ValueError):
            top_n('admin', 3)
