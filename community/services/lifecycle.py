# community/services/lifecycle.py
"""
Donation lifecycle manager.

A donation moves pending -> accepted -> in_transit -> delivered and never
back. Every move is committed as one conditional UPDATE keyed on the status
the caller observed, so two volunteers racing for the same donation cannot
both win: the loser's UPDATE matches zero rows and gets a Conflict.
"""

import logging

from django.db import transaction
from django.forms.models import model_to_dict
from django.utils import timezone

from ..exceptions import Conflict, InvalidState, InvalidTransition, NotFound, Unauthorized, ValidationFailed
from ..forms import DonationForm, DeliveryProofForm
from ..models import Donation, User
from .. import notifications

logger = logging.getLogger(__name__)

Status = Donation.DonationStatus

STATUS_ORDER = [Status.PENDING, Status.ACCEPTED, Status.IN_TRANSIT, Status.DELIVERED]

# Status reached -> notification event emitted after commit
TRANSITION_EVENTS = {
    Status.ACCEPTED: notifications.DONATION_ACCEPTED,
    Status.DELIVERED: notifications.DONATION_DELIVERED,
}


def next_status(status):
    """The only status `status` may move to, or None when terminal."""
    index = STATUS_ORDER.index(status)
    if index + 1 >= len(STATUS_ORDER):
        return None
    return STATUS_ORDER[index + 1]


def get_donation(donation_id):
    try:
        return Donation.objects.get(pk=donation_id)
    except (Donation.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Donation {donation_id} not found.")


class DonationLifecycle:
    """
    Applies status transitions. `clock` supplies commit timestamps, so
    pickup and delivery times are always the server's, never the client's.
    """

    def __init__(self, clock=timezone.now):
        self.clock = clock

    def apply_transition(self, donation_id, actor, target_state):
        donation = get_donation(donation_id)
        return self.transition(donation, actor, target_state)

    def transition(self, donation, actor, target_state):
        """
        Move an already loaded `donation` to `target_state`.

        `donation` is the caller's snapshot; if the row changed since it was
        read, the conditional write fails with Conflict.
        """
        current = donation.status
        if target_state not in Status.values or target_state != next_status(current):
            raise InvalidTransition(current, target_state)

        self._check_guard(donation, actor, target_state)

        now = self.clock()
        filters = {'pk': donation.pk, 'status': current}
        changes = {'status': target_state, 'updated_at': now}
        if target_state == Status.ACCEPTED:
            filters['volunteer__isnull'] = True
            changes['volunteer'] = actor
        else:
            filters['volunteer'] = actor
        if target_state == Status.IN_TRANSIT:
            changes['picked_up_at'] = now
        elif target_state == Status.DELIVERED:
            changes['delivered_at'] = now

        with transaction.atomic():
            updated = Donation.objects.filter(**filters).update(**changes)
            if updated == 0:
                logger.info("Lost race on donation %s: %s -> %s by user %s",
                            donation.pk, current, target_state, actor.pk)
                raise Conflict()
            event = TRANSITION_EVENTS.get(target_state)
            if event:
                notifications.notify(event, donation)

        logger.info("Donation %s moved %s -> %s by user %s", donation.pk, current, target_state, actor.pk)
        donation.refresh_from_db()
        return donation

    def _check_guard(self, donation, actor, target_state):
        if actor is None or not getattr(actor, 'is_authenticated', False):
            raise Unauthorized("You must be signed in.")
        if target_state == Status.ACCEPTED:
            if actor.user_type != User.UserType.VOLUNTEER:
                raise Unauthorized("Only volunteers can accept donations.")
            if donation.donor_id == actor.pk:
                raise Unauthorized("You cannot accept your own donation.")
        elif donation.volunteer_id != actor.pk:
            raise Unauthorized("Only the assigned volunteer can update this donation.")

    # --- donor-side operations ---

    def create_donation(self, actor, data):
        """Post a new donation. `actor` is None for anonymous donors."""
        if actor is not None and actor.is_authenticated and actor.user_type != User.UserType.DONOR:
            raise Unauthorized("Only donors can post donations.")

        form = DonationForm(data)
        if not form.is_valid():
            raise ValidationFailed(form.errors.get_json_data(), "Invalid donation data.")

        with transaction.atomic():
            donation = form.save(commit=False)
            donation.donor = actor if actor is not None and actor.is_authenticated else None
            donation.status = Status.PENDING
            donation.volunteer = None
            donation.picked_up_at = None
            donation.delivered_at = None
            donation.save()
            notifications.notify(notifications.DONATION_CREATED, donation)

        logger.info("Donation %s created by %s", donation.pk, donation.donor_id or 'anonymous')
        return donation

    def update_donation(self, donation_id, actor, data):
        donation = get_donation(donation_id)
        self._check_owner(donation, actor)
        if donation.status != Status.PENDING:
            raise InvalidState("Only pending donations can be edited.")

        merged = model_to_dict(donation, fields=DonationForm.Meta.fields)
        merged.update({key: value for key, value in data.items() if key in DonationForm.Meta.fields})
        form = DonationForm(merged, instance=donation)
        if not form.is_valid():
            raise ValidationFailed(form.errors.get_json_data(), "Invalid donation data.")

        changes = {field: form.cleaned_data[field] for field in DonationForm.Meta.fields}
        changes['updated_at'] = self.clock()
        updated = Donation.objects.filter(pk=donation.pk, status=Status.PENDING).update(**changes)
        if updated == 0:
            raise Conflict()
        donation.refresh_from_db()
        logger.info("Donation %s edited by user %s", donation.pk, actor.pk)
        return donation

    def delete_donation(self, donation_id, actor):
        donation = get_donation(donation_id)
        self._check_owner(donation, actor)
        if donation.status != Status.PENDING:
            raise InvalidState("Only pending donations can be deleted.")

        deleted, _ = Donation.objects.filter(pk=donation.pk, status=Status.PENDING, donor=actor).delete()
        if deleted == 0:
            raise Conflict()
        logger.info("Donation %s deleted by user %s", donation_id, actor.pk)

    def _check_owner(self, donation, actor):
        if actor is None or not getattr(actor, 'is_authenticated', False):
            raise Unauthorized("You must be signed in.")
        if donation.donor_id is None or donation.donor_id != actor.pk:
            raise Unauthorized("Only the donor who posted this donation can change it.")

    # --- collaborator hooks ---

    def add_delivery_proof(self, donation_id, actor, data):
        """Store the reference of an image uploaded to external storage."""
        donation = get_donation(donation_id)
        if actor is None or donation.volunteer_id is None or donation.volunteer_id != actor.pk:
            raise Unauthorized("Only the assigned volunteer can add delivery proof.")

        form = DeliveryProofForm(data)
        if not form.is_valid():
            raise ValidationFailed(form.errors.get_json_data(), "Invalid proof data.")
        proof = form.save(commit=False)
        proof.donation = donation
        proof.uploaded_by = actor
        proof.save()
        logger.info("Proof (%s) added to donation %s", proof.proof_type, donation.pk)
        return proof

    def chat_counterpart(self, donation_id, actor):
        """Id of the user `actor` may chat with about this donation, or None."""
        donation = get_donation(donation_id)
        if actor is None or actor.pk not in (donation.donor_id, donation.volunteer_id):
            raise Unauthorized("You are not part of this donation.")
        return donation.counterpart_id(actor.pk)


lifecycle = DonationLifecycle()
apply_transition = lifecycle.apply_transition
delete_donation = lifecycle.delete_donation
create_donation = lifecycle.create_donation
update_donation = lifecycle.update_donation
add_delivery_proof = lifecycle.add_delivery_proof
chat_counterpart = lifecycle.chat_counterpart
