"""Maintain the email set of a donor: exactly one email is primary whenever the set is not empty.

Emails are matched case-insensitively. None of the functions commit.
"""
from sqlalchemy import func

from donor_admin.models.donor import DonorEmailModel


def find_email_owner( email ):
    """The DonorEmailModel holding the address on any donor, or None."""

    return DonorEmailModel.query.filter( func.lower( DonorEmailModel.email ) == email.lower() ).first()


def add_email( donor, email, primary=False ):
    """Append the email to the donor. The first email of a donor is always primary.

    :return: The new DonorEmailModel.
    """

    donor_email = DonorEmailModel( email=email, is_primary=False )
    donor.emails.append( donor_email )
    if primary or len( donor.emails ) == 1:
        set_primary_email( donor, donor_email )
    return donor_email


def set_primary_email( donor, donor_email ):
    """Mark donor_email primary and demote the previous primary."""

    for other_email in donor.emails:
        other_email.is_primary = other_email is donor_email
    return donor_email


def remove_email( donor, donor_email ):
    """Remove the email from the donor.

    Removing the primary promotes the oldest remaining email.

    :return: The promoted DonorEmailModel, or None when no promotion happened.
    """

    was_primary = donor_email.is_primary
    donor.emails.remove( donor_email )
    if was_primary and donor.emails:
        oldest_email = min( donor.emails, key=lambda remaining: remaining.id )
        return set_primary_email( donor, oldest_email )
    return None
