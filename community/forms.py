# community/forms.py

from django import forms
from django.core.exceptions import ValidationError
from .models import Donation, DeliveryProof, Rating


def validate_min_length(value, length, label):
    if len((value or '').strip()) < length:
        raise ValidationError(f"{label} must be at least {length} characters.")


class DonationForm(forms.ModelForm):
    """
    A form for Donors (or anonymous visitors) to post and edit food Donations.
    Status, volunteer and lifecycle timestamps are never taken from input.
    """
    expiry_date = forms.DateTimeField(
        widget=forms.DateTimeInput(attrs={'type': 'datetime-local'}),
        label="Best Before"
    )
    pickup_time = forms.DateTimeField(
        widget=forms.DateTimeInput(attrs={'type': 'datetime-local'}),
        label="Pickup Time"
    )
    urgency = forms.ChoiceField(choices=Donation.Urgency.choices, required=False)

    class Meta:
        model = Donation
        fields = [
            'title',
            'description',
            'food_type',
            'quantity',
            'urgency',
            'image_url',
            'pickup_address',
            'pickup_city',
            'pickup_latitude',
            'pickup_longitude',
            'expiry_date',
            'pickup_time',
        ]
        labels = {
            'food_type': 'Food Type',
            'quantity': 'Quantity (e.g., 12kg, 20 meals)',
            'pickup_address': 'Pickup Address',
            'pickup_city': 'City',
        }
        widgets = {
            'pickup_latitude': forms.HiddenInput(),
            'pickup_longitude': forms.HiddenInput(),
            'pickup_address': forms.Textarea(attrs={'rows': 3}),
        }

    def clean_title(self):
        title = self.cleaned_data.get('title')
        validate_min_length(title, 3, "Title")
        return title.strip()

    def clean_description(self):
        description = self.cleaned_data.get('description')
        validate_min_length(description, 10, "Description")
        return description.strip()

    def clean_food_type(self):
        food_type = self.cleaned_data.get('food_type')
        validate_min_length(food_type, 2, "Food type")
        return food_type.strip()

    def clean_quantity(self):
        quantity = (self.cleaned_data.get('quantity') or '').strip()
        if not quantity:
            raise ValidationError("Quantity is required.")
        return quantity

    def clean_pickup_address(self):
        address = self.cleaned_data.get('pickup_address')
        validate_min_length(address, 5, "Address")
        return address.strip()

    def clean_pickup_city(self):
        city = self.cleaned_data.get('pickup_city')
        validate_min_length(city, 2, "City")
        return city.strip()

    def clean_urgency(self):
        return self.cleaned_data.get('urgency') or Donation.Urgency.NORMAL


class RatingForm(forms.ModelForm):
    class Meta:
        model = Rating
        fields = ['rating', 'feedback']

    def clean_feedback(self):
        feedback = (self.cleaned_data.get('feedback') or '').strip()
        return feedback or None


class DeliveryProofForm(forms.ModelForm):
    proof_type = forms.ChoiceField(choices=DeliveryProof.ProofType.choices, required=False)

    class Meta:
        model = DeliveryProof
        fields = ['image_url', 'proof_type']

    def clean_proof_type(self):
        return self.cleaned_data.get('proof_type') or DeliveryProof.ProofType.AFTER
