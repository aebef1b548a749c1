"""Append entries to the note log of a donor. The caller commits."""
from datetime import datetime

from donor_admin.models.donor import DonorNoteModel

NOTE_DATE_FORMAT = '%B %d, %Y %H:%M:%S'


def add_note( donor, note ):
    """Append a timestamped note to the donor.

    :param donor: The DonorModel.
    :param str note: Sanitized note text.
    :return: The DonorNoteModel.
    """

    donor_note = DonorNoteModel( note=note, date_in_utc=datetime.utcnow() )
    donor.notes.append( donor_note )
    return donor_note


def format_note( donor_note ):
    """The note as it is displayed on the timeline: 'January 02, 2026 10:00:00 - The note.'"""

    return '{} - {}'.format( donor_note.date_in_utc.strftime( NOTE_DATE_FORMAT ), donor_note.note )
