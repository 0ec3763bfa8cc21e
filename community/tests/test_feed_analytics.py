from datetime import date, datetime, timedelta, timezone as dt_timezone

from django.test import TestCase
from django.utils import timezone

from ..exceptions import Unauthorized
from ..models import Donation, User
from ..services.analytics import area_analytics, personal_analytics
from ..services.feed import filter_donations
from .factories import make_donation, make_user

Status = Donation.DonationStatus


class FeedFilterTests(TestCase):
    def setUp(self):
        donor = make_user('donor')
        volunteer = make_user('vol', User.UserType.VOLUNTEER)
        now = timezone.now()
        self.rice = make_donation(donor, title='Rice and dal', food_type='cooked', quantity='20 meals',
                                  pickup_city='Pune', urgency='urgent', expiry_date=now + timedelta(hours=5))
        self.bread = make_donation(donor, title='Bread loaves', food_type='bakery', quantity='5',
                                   pickup_city='Mumbai', expiry_date=now + timedelta(hours=1))
        self.fruit = make_donation(donor, Status.DELIVERED, volunteer=volunteer, title='Bananas',
                                   description='A crate of ripe bananas from the market.',
                                   food_type='produce', quantity='8kg', pickup_city='Pune',
                                   expiry_date=now + timedelta(days=2))
        self.all = Donation.objects.all()

    def ids(self, donations):
        return [donation.pk for donation in donations]

    def test_search_is_case_insensitive_over_title_description_and_city(self):
        self.assertEqual(self.ids(filter_donations(self.all, search='BREAD')), [self.bread.pk])
        self.assertEqual(set(self.ids(filter_donations(self.all, search='pune'))), {self.rice.pk, self.fruit.pk})
        self.assertEqual(self.ids(filter_donations(self.all, search='ripe')), [self.fruit.pk])

    def test_dropdown_filters(self):
        self.assertEqual(self.ids(filter_donations(self.all, food_type='bakery')), [self.bread.pk])
        self.assertEqual(self.ids(filter_donations(self.all, status='delivered')), [self.fruit.pk])
        self.assertEqual(self.ids(filter_donations(self.all, urgency='urgent')), [self.rice.pk])
        self.assertEqual(len(filter_donations(self.all, food_type='all', status='all', urgency='all')), 3)

    def test_sort_orders(self):
        self.assertEqual(self.ids(filter_donations(self.all, sort_by='newest')),
                         [self.fruit.pk, self.bread.pk, self.rice.pk])
        self.assertEqual(self.ids(filter_donations(self.all, sort_by='oldest')),
                         [self.rice.pk, self.bread.pk, self.fruit.pk])
        self.assertEqual(self.ids(filter_donations(self.all, sort_by='expiry')),
                         [self.bread.pk, self.rice.pk, self.fruit.pk])
        self.assertEqual(self.ids(filter_donations(self.all, sort_by='quantity')),
                         [self.rice.pk, self.fruit.pk, self.bread.pk])


class AnalyticsTests(TestCase):
    def setUp(self):
        self.donor = make_user('donor')
        self.volunteer = make_user('vol', User.UserType.VOLUNTEER)
        self.admin = make_user('boss', User.UserType.ADMIN)

    def test_personal_analytics_for_donor(self):
        today = date(2025, 6, 10)
        make_donation(self.donor, quantity='10', food_type='cooked',
                      created_at=datetime(2025, 6, 10, 9, tzinfo=dt_timezone.utc))
        make_donation(self.donor, quantity='4 kg', food_type='cooked',
                      created_at=datetime(2025, 6, 8, 9, tzinfo=dt_timezone.utc))
        make_donation(self.donor, quantity='some', food_type='bakery',
                      created_at=datetime(2025, 5, 1, 9, tzinfo=dt_timezone.utc))

        stats = personal_analytics(self.donor, User.UserType.DONOR, today=today)
        self.assertEqual(stats['total_donations'], 3)
        self.assertEqual(stats['total_meals'], 14)
        self.assertEqual(stats['people_helped'], 21)
        self.assertEqual(stats['waste_reduced'], 7)
        self.assertEqual(len(stats['weekly']), 7)
        self.assertEqual(stats['weekly'][-1], {'date': '2025-06-10', 'day': 'Tue', 'count': 1})
        self.assertEqual(sum(day['count'] for day in stats['weekly']), 2)
        self.assertEqual(stats['food_types'], [{'food_type': 'cooked', 'count': 2}, {'food_type': 'bakery', 'count': 1}])

    def test_personal_analytics_for_volunteer(self):
        make_donation(self.donor, Status.ACCEPTED, volunteer=self.volunteer, quantity='6')
        make_donation(self.donor)
        stats = personal_analytics(self.volunteer)
        self.assertEqual(stats['total_donations'], 1)
        self.assertEqual(stats['total_meals'], 6)

    def test_area_analytics_requires_admin(self):
        with self.assertRaises(Unauthorized):
            area_analytics(self.donor)

    def test_area_analytics_groups_by_city(self):
        other_donor = make_user('other')
        make_donation(self.donor, pickup_city='Pune')
        make_donation(other_donor, Status.IN_TRANSIT, volunteer=self.volunteer, pickup_city='Pune')
        make_donation(self.donor, Status.DELIVERED, volunteer=self.volunteer, pickup_city='Pune')
        make_donation(self.donor, pickup_city='Goa')

        areas = {row['pickup_city']: row for row in area_analytics(self.admin)}
        pune = areas['Pune']
        self.assertEqual(pune['total_donations'], 3)
        self.assertEqual(pune['pending_donations'], 1)
        self.assertEqual(pune['in_transit_donations'], 1)
        self.assertEqual(pune['completed_donations'], 1)
        self.assertEqual(pune['unique_donors'], 2)
        self.assertEqual(pune['unique_volunteers'], 1)
        self.assertEqual(areas['Goa']['total_donations'], 1)
        self.assertEqual(area_analytics(self.admin)[0]['pickup_city'], 'Pune')
