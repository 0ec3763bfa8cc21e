import base64

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from django.core.management.base import BaseCommand


def urlsafe_b64encode_nopad(data):
    return base64.urlsafe_b64encode(data).rstrip(b'=').decode('utf-8')


def generate_vapid_keys():
    """Return a (public, private) VAPID key pair on the P-256 curve, URL-safe base64 without padding."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    public_key_bytes = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint
    )
    private_key_bytes = private_key.private_numbers().private_value.to_bytes(32, byteorder="big")
    return urlsafe_b64encode_nopad(public_key_bytes), urlsafe_b64encode_nopad(private_key_bytes)


class Command(BaseCommand):
    help = "Generate a VAPID key pair for the web push notification backend."

    def handle(self, *args, **options):
        public_key, private_key = generate_vapid_keys()
        self.stdout.write(self.style.SUCCESS("Successfully generated your VAPID keys!"))
        self.stdout.write("=" * 40)
        self.stdout.write(f"VAPID_PUBLIC_KEY={public_key}")
        self.stdout.write(f"VAPID_PRIVATE_KEY={private_key}")
        self.stdout.write("=" * 40)
        self.stdout.write("Copy these keys into your .env file.")
