"""Module to ensure the donor controllers, e.g. editing or deleting a donor, are doing what they should.

The tests validate the referential integrity of donors, their linked users, addresses and payments when a donor is
updated.
"""
import unittest

import mock
from sqlalchemy.exc import SQLAlchemyError

from donor_admin.app import create_app
from donor_admin.controllers.donor import add_donor_email
from donor_admin.controllers.donor import add_donor_note
from donor_admin.controllers.donor import delete_donor
from donor_admin.controllers.donor import disconnect_donor_user
from donor_admin.controllers.donor import edit_donor
from donor_admin.controllers.donor import get_donor
from donor_admin.controllers.donor import get_donor_notes
from donor_admin.controllers.donor import remove_donor_email
from donor_admin.controllers.donor import set_donor_primary_email
from donor_admin.exceptions.exception_donor import DonorEmailDuplicateError
from donor_admin.exceptions.exception_donor import DonorEmailInvalidError
from donor_admin.exceptions.exception_donor import DonorEmailTakenError
from donor_admin.exceptions.exception_donor import DonorNotFoundError
from donor_admin.exceptions.exception_donor import DonorRequestError
from donor_admin.exceptions.exception_donor import DonorValidationError
from donor_admin.flask_essentials import database
from donor_admin.flask_essentials import hooks
from donor_admin.models.donor import DonorEmailModel
from donor_admin.models.donor import DonorModel
from donor_admin.models.donor import DonorNoteModel
from donor_admin.models.payment import PaymentModel
from donor_admin.models.user import UserAddressModel
from tests.helpers.model_helpers import create_donor
from tests.helpers.model_helpers import create_user

EMPTY_ADDRESS = { 'line1': '', 'line2': '', 'city': '', 'state': '', 'zip': '', 'country': '' }


class DonorControllersTestCase( unittest.TestCase ):
    """This test suite is designed to verify the Donor Record Update Service: edits, notes, deletions and emails.

    python -m unittest discover -v
    python -m unittest -v tests.test_donor_controllers.DonorControllersTestCase
    python -m unittest -v tests.test_donor_controllers.DonorControllersTestCase.test_edit_donor_links_user
    """

    def setUp( self ):
        self.app = create_app( 'TEST' )
        self.app.testing = True

        with self.app.app_context():
            database.drop_all()
            database.create_all()

    def tearDown( self ):
        with self.app.app_context():
            database.session.commit()
            database.session.close()

    def get_payments( self, donor_id=None ):
        """The payments, optionally only those of a donor, ordered by ID."""

        query = PaymentModel.query
        if donor_id is not None:
            query = query.filter_by( donor_id=donor_id )
        return query.order_by( PaymentModel.id ).all()

    def test_edit_donor_links_user( self ):
        """Linking an unlinked donor stores a new address and reassigns the payments to the user."""

        with self.app.app_context():
            create_user( 12 )
            create_donor( 5, total_payments=3 )

            output = edit_donor( 5, { 'name': 'Jane', 'user_id': 12, 'city': 'Austin' } )

            self.assertTrue( output[ 'success' ] )
            self.assertNotIn( 'partial_success', output )
            self.assertEqual( output[ 'data' ][ 'name' ], 'Jane' )
            self.assertEqual( output[ 'data' ][ 'user_id' ], 12 )
            self.assertEqual( output[ 'data' ][ 'address' ], dict( EMPTY_ADDRESS, city='Austin' ) )

            donor = database.session.get( DonorModel, 5 )
            self.assertEqual( donor.name, 'Jane' )
            self.assertEqual( donor.linked_user_id, 12 )
            self.assertEqual( database.session.get( UserAddressModel, 12 ).to_dict(), dict( EMPTY_ADDRESS, city='Austin' ) )

            payments = self.get_payments( 5 )
            self.assertEqual( len( payments ), 3 )
            for payment in payments:
                self.assertEqual( payment.user_id, 12 )

    def test_edit_donor_merges_address( self ):
        """A partial address update falls back to the stored fields and leaves the payments alone."""

        with self.app.app_context():
            create_user( 12, address={ 'city': 'Reno', 'state': 'NV' } )
            create_donor( 5, user_id=12, total_payments=2 )
            payment = self.get_payments( 5 )[ 0 ]
            payment.user_id = 99
            database.session.commit()

            output = edit_donor( 5, { 'name': 'Jane', 'user_id': 12, 'city': 'Austin' } )

            self.assertTrue( output[ 'success' ] )
            self.assertEqual( output[ 'data' ][ 'address' ], dict( EMPTY_ADDRESS, city='Austin', state='NV' ) )
            self.assertEqual(
                database.session.get( UserAddressModel, 12 ).to_dict(), dict( EMPTY_ADDRESS, city='Austin', state='NV' )
            )
            # The linked user did not change so the payments keep their owning user.
            self.assertEqual( [ payment.user_id for payment in self.get_payments( 5 ) ], [ 99, 12 ] )

    def test_edit_donor_explicit_empty_field_blanks_stored_field( self ):
        """A field explicitly supplied as empty overwrites the stored value."""

        with self.app.app_context():
            create_user( 12, address={ 'line1': '1 Main St', 'city': 'Reno' } )
            create_donor( 5, user_id=12 )

            output = edit_donor( 5, { 'name': 'Jane', 'user_id': 12, 'line1': '' } )

            self.assertEqual( output[ 'data' ][ 'address' ], dict( EMPTY_ADDRESS, city='Reno' ) )

    def test_edit_donor_collects_validation_errors( self ):
        """A user linked to another donor and a user that does not exist are both reported, and nothing is written."""

        with self.app.app_context():
            create_user( 12 )
            create_donor( 5, name='Ralph Kramden', total_payments=1 )
            create_donor( 6, user_id=12, emails=[ 'alice@kramden.org' ] )
            # A donor linked to a user that no longer exists.
            create_donor( 7, user_id=77 )

            with self.assertRaises( DonorValidationError ) as context:
                edit_donor( 5, { 'name': 'Jane', 'user_id': 12 } )
            self.assertEqual( [ error[ 'code' ] for error in context.exception.errors ], [ 'duplicate-link' ] )

            with self.assertRaises( DonorValidationError ) as context:
                edit_donor( 5, { 'name': 'Jane', 'user_id': 99 } )
            self.assertEqual( [ error[ 'code' ] for error in context.exception.errors ], [ 'invalid-account' ] )

            with self.assertRaises( DonorValidationError ) as context:
                edit_donor( 5, { 'name': 'Jane', 'user_id': 77 } )
            self.assertEqual(
                [ error[ 'code' ] for error in context.exception.errors ], [ 'duplicate-link', 'invalid-account' ]
            )

            donor = database.session.get( DonorModel, 5 )
            self.assertEqual( donor.name, 'Ralph Kramden' )
            self.assertEqual( donor.linked_user_id, 0 )
            self.assertEqual( self.get_payments( 5 )[ 0 ].user_id, 0 )
            self.assertIsNone( database.session.get( UserAddressModel, 12 ) )

    def test_edit_donor_same_user_is_not_validated( self ):
        """Keeping the linked user never raises, even when the user no longer exists."""

        with self.app.app_context():
            create_donor( 5, user_id=77 )

            output = edit_donor( 5, { 'name': 'Jane', 'user_id': 77 } )

            self.assertTrue( output[ 'success' ] )
            self.assertEqual( database.session.get( DonorModel, 5 ).name, 'Jane' )

    def test_edit_donor_defaults_unlink_the_donor( self ):
        """An empty patch clears the name and unlinks the donor, reassigning its payments to no user."""

        with self.app.app_context():
            create_user( 12 )
            create_donor( 5, user_id=12, total_payments=2 )

            output = edit_donor( 5, {} )

            self.assertTrue( output[ 'success' ] )
            self.assertEqual( output[ 'data' ], { 'name': '', 'user_id': 0, 'address': {} } )
            donor = database.session.get( DonorModel, 5 )
            self.assertIsNone( donor.user_id )
            for payment in self.get_payments( 5 ):
                self.assertEqual( payment.user_id, 0 )

    def test_edit_donor_empty_user_id_unlinks( self ):
        """A cleared user field arrives as the empty string and unlinks the donor like 0."""

        with self.app.app_context():
            create_user( 12 )
            create_donor( 5, user_id=12, total_payments=1 )

            output = edit_donor( 5, { 'name': 'Jane', 'user_id': '' } )

            self.assertTrue( output[ 'success' ] )
            self.assertEqual( output[ 'data' ][ 'user_id' ], 0 )
            self.assertIsNone( database.session.get( DonorModel, 5 ).user_id )
            self.assertEqual( self.get_payments( 5 )[ 0 ].user_id, 0 )

    def test_edit_donor_sanitizes_name( self ):
        """The name and address are stripped of tags and extra whitespace."""

        with self.app.app_context():
            create_user( 12 )
            create_donor( 5 )

            output = edit_donor( 5, { 'name': ' <b>Jane</b>   Doe ', 'user_id': 12, 'city': '<i>Austin</i>' } )

            self.assertEqual( output[ 'data' ][ 'name' ], 'Jane Doe' )
            self.assertEqual( output[ 'data' ][ 'address' ][ 'city' ], 'Austin' )

    def test_edit_donor_hooks( self ):
        """The filters transform the donor data and address, the actions fire around the write."""

        with self.app.app_context():
            create_user( 12 )
            create_donor( 5 )

            pre_edit = mock.Mock()
            post_edit = mock.Mock()
            hooks.add_action( 'pre_edit_donor', pre_edit )
            hooks.add_action( 'post_edit_donor', post_edit )
            hooks.add_filter( 'edit_donor_info', lambda donor_data, donor_id: dict( donor_data, name='Filtered' ) )
            hooks.add_filter( 'edit_donor_address', lambda address, donor_id: dict( address, country='US' ) )

            output = edit_donor( 5, { 'name': 'Jane', 'user_id': 12 } )

            self.assertEqual( output[ 'data' ][ 'name' ], 'Filtered' )
            address = dict( EMPTY_ADDRESS, country='US' )
            pre_edit.assert_called_once_with( 5, { 'name': 'Filtered', 'user_id': 12 }, address )
            post_edit.assert_called_once_with( 5, dict( address, name='Filtered', user_id=12 ) )
            self.assertEqual( database.session.get( UserAddressModel, 12 ).country, 'US' )

    def test_edit_donor_write_failure( self ):
        """A failed write is reported, the cascades are skipped and the post action still fires."""

        with self.app.app_context():
            create_user( 12 )
            create_donor( 5, total_payments=1 )

            pre_edit = mock.Mock()
            post_edit = mock.Mock()
            hooks.add_action( 'pre_edit_donor', pre_edit )
            hooks.add_action( 'post_edit_donor', post_edit )

            with mock.patch.object( database.session, 'commit', side_effect=SQLAlchemyError( 'database is gone' ) ):
                output = edit_donor( 5, { 'name': 'Jane', 'user_id': 12, 'city': 'Austin' } )

            self.assertFalse( output[ 'success' ] )
            self.assertEqual( output[ 'code' ], 'write-failed' )
            pre_edit.assert_called_once()
            post_edit.assert_called_once_with( 5, { 'name': 'Jane', 'user_id': 12 } )

            donor = database.session.get( DonorModel, 5 )
            self.assertEqual( donor.linked_user_id, 0 )
            self.assertIsNone( database.session.get( UserAddressModel, 12 ) )
            self.assertEqual( self.get_payments( 5 )[ 0 ].user_id, 0 )

    def test_edit_donor_cascade_failure_is_partial_success( self ):
        """A failed payment cascade does not undo the donor write and is reported as a partial success."""

        with self.app.app_context():
            create_user( 12 )
            create_donor( 5, total_payments=2 )

            with mock.patch(
                'donor_admin.controllers.donor.reassign_payment_user', side_effect=SQLAlchemyError( 'lock timeout' )
            ):
                output = edit_donor( 5, { 'name': 'Jane', 'user_id': 12 } )

            self.assertTrue( output[ 'success' ] )
            self.assertTrue( output[ 'partial_success' ] )
            self.assertEqual( output[ 'cascade_failures' ], [ 'payments' ] )
            self.assertEqual( database.session.get( DonorModel, 5 ).linked_user_id, 12 )
            self.assertIsNotNone( database.session.get( UserAddressModel, 12 ) )
            for payment in self.get_payments( 5 ):
                self.assertEqual( payment.user_id, 0 )

    def test_edit_donor_post_action_receives_address( self ):
        """After a successful edit the post action carries the stored address fields with the donor data."""

        with self.app.app_context():
            create_user( 12, address={ 'zip': '89501' } )
            create_donor( 5 )
            post_edit = mock.Mock()
            hooks.add_action( 'post_edit_donor', post_edit )

            edit_donor( 5, { 'name': 'Jane', 'user_id': 12, 'city': 'Austin' } )

            post_edit.assert_called_once_with(
                5, dict( EMPTY_ADDRESS, name='Jane', user_id=12, city='Austin', zip='89501' )
            )

    def test_add_donor_note_strips_escaped_markup( self ):
        """Escaped markup is never stored as a live tag."""

        with self.app.app_context():
            create_donor( 5 )

            output = add_donor_note( 5, '&lt;img src=x onerror=alert(1)&gt;Thank you.' )

            self.assertEqual( output[ 'data' ][ 'note' ], 'Thank you.' )
            self.assertEqual( database.session.get( DonorModel, 5 ).notes[ 0 ].note, 'Thank you.' )

            with self.assertRaises( DonorValidationError ):
                add_donor_note( 5, '&lt;script&gt;&lt;/script&gt;' )

    def test_edit_donor_not_found( self ):
        """Editing a donor that does not exist raises DonorNotFoundError."""

        with self.app.app_context():
            with self.assertRaises( DonorNotFoundError ):
                edit_donor( 404, { 'name': 'Jane' } )

    def test_add_donor_note( self ):
        """A note is sanitized, timestamped and appended to the log."""

        with self.app.app_context():
            create_donor( 5 )
            pre_insert = mock.Mock()
            hooks.add_action( 'pre_insert_donor_note', pre_insert )

            output = add_donor_note( 5, '  Called to <b>thank</b> them.  ' )
            add_donor_note( 5, 'Second note.' )

            self.assertTrue( output[ 'success' ] )
            self.assertEqual( output[ 'data' ][ 'note' ], 'Called to thank them.' )
            self.assertTrue( output[ 'data' ][ 'display' ].endswith( ' - Called to thank them.' ) )
            pre_insert.assert_any_call( 5, 'Called to thank them.' )

            notes = get_donor_notes( 5 )
            self.assertEqual( [ note[ 'note' ] for note in notes ], [ 'Called to thank them.', 'Second note.' ] )
            self.assertIsNotNone( notes[ 0 ][ 'date_in_utc' ] )

    def test_add_donor_note_validation( self ):
        """An empty note is rejected before the donor is looked up, an unknown donor is not found."""

        with self.app.app_context():
            create_donor( 5 )
            for note in [ '', '   ', '<p></p>', None ]:
                with self.assertRaises( DonorValidationError ):
                    add_donor_note( 5, note )
            with self.assertRaises( DonorValidationError ):
                add_donor_note( 404, ' ' )
            with self.assertRaises( DonorNotFoundError ):
                add_donor_note( 404, 'A note.' )
            self.assertEqual( DonorNoteModel.query.count(), 0 )

    def test_delete_donor_requires_confirmation( self ):
        """An unconfirmed delete fails and performs no writes."""

        with self.app.app_context():
            create_donor( 5, total_payments=2 )

            with mock.patch.object( database.session, 'commit' ) as commit:
                for purge_records in [ True, False ]:
                    with self.assertRaises( DonorValidationError ) as context:
                        delete_donor( 5, confirm_delete=False, purge_records=purge_records )
                    self.assertEqual( context.exception.errors[ 0 ][ 'code' ], 'customer-delete-no-confirm' )
                    self.assertEqual(
                        context.exception.redirect,
                        '/admin/donors?view=overview&id=5&give-message=customer-delete-no-confirm'
                    )
                commit.assert_not_called()

            self.assertIsNotNone( database.session.get( DonorModel, 5 ) )
            self.assertEqual( len( self.get_payments( 5 ) ), 2 )

    def test_delete_donor_purge_records( self ):
        """Purging deletes the donor with its emails and notes, and every payment it owned."""

        with self.app.app_context():
            create_donor( 5, emails=[ 'ralph@kramden.org' ], total_payments=3 )
            create_donor( 6, emails=[ 'alice@kramden.org' ], total_payments=1 )
            add_donor_note( 5, 'About to be deleted.' )
            pre_delete = mock.Mock()
            hooks.add_action( 'pre_delete_donor', pre_delete )

            output = delete_donor( 5, confirm_delete=True, purge_records=True )

            self.assertTrue( output[ 'success' ] )
            self.assertEqual( output[ 'code' ], 'customer-deleted' )
            self.assertIn( 'give-message=customer-deleted', output[ 'redirect' ] )
            pre_delete.assert_called_once_with( 5, True, True )

            self.assertIsNone( database.session.get( DonorModel, 5 ) )
            self.assertEqual( self.get_payments( 5 ), [] )
            self.assertEqual( len( self.get_payments() ), 1 )
            self.assertEqual( DonorEmailModel.query.filter_by( donor_id=5 ).count(), 0 )
            self.assertEqual( DonorNoteModel.query.filter_by( donor_id=5 ).count(), 0 )
            self.assertEqual( DonorEmailModel.query.filter_by( donor_id=6 ).count(), 1 )

    def test_delete_donor_detaches_payments( self ):
        """Without purging the payments are kept with their owning donor cleared."""

        with self.app.app_context():
            create_donor( 5, total_payments=3 )
            payment_ids = database.session.get( DonorModel, 5 ).payment_id_list

            output = delete_donor( 5, confirm_delete=True, purge_records=False )

            self.assertTrue( output[ 'success' ] )
            self.assertIsNone( database.session.get( DonorModel, 5 ) )
            payments = self.get_payments()
            self.assertEqual( [ payment.id for payment in payments ], payment_ids )
            for payment in payments:
                self.assertEqual( payment.donor_id, 0 )

    def test_delete_donor_failure_leaves_payments( self ):
        """When the donor cannot be deleted its payments are untouched."""

        with self.app.app_context():
            create_donor( 5, total_payments=2 )

            with mock.patch.object( database.session, 'commit', side_effect=SQLAlchemyError( 'database is gone' ) ):
                output = delete_donor( 5, confirm_delete=True, purge_records=True )

            self.assertFalse( output[ 'success' ] )
            self.assertEqual( output[ 'code' ], 'delete-failed' )
            self.assertIn( 'view=delete', output[ 'redirect' ] )
            self.assertIsNotNone( database.session.get( DonorModel, 5 ) )
            self.assertEqual( len( self.get_payments( 5 ) ), 2 )

    def test_delete_donor_not_found( self ):
        """Only positive IDs of existing donors can be deleted."""

        with self.app.app_context():
            for donor_id in [ 0, -1, 404 ]:
                with self.assertRaises( DonorNotFoundError ):
                    delete_donor( donor_id, confirm_delete=True )

    def test_disconnect_donor_user( self ):
        """Disconnecting clears the linked user of the donor and of its payments."""

        with self.app.app_context():
            create_user( 12 )
            create_donor( 5, user_id=12, total_payments=2 )
            pre_disconnect = mock.Mock()
            post_disconnect = mock.Mock()
            hooks.add_action( 'pre_donor_disconnect_user_id', pre_disconnect )
            hooks.add_action( 'post_donor_disconnect_user_id', post_disconnect )

            output = disconnect_donor_user( 5 )

            self.assertTrue( output[ 'success' ] )
            self.assertEqual( database.session.get( DonorModel, 5 ).linked_user_id, 0 )
            for payment in self.get_payments( 5 ):
                self.assertEqual( payment.user_id, 0 )
            pre_disconnect.assert_called_once_with( 5, 12 )
            post_disconnect.assert_called_once_with( 5 )

            # The user can now be linked to another donor.
            create_donor( 6 )
            self.assertTrue( edit_donor( 6, { 'name': 'Alice', 'user_id': 12 } )[ 'success' ] )

    def test_disconnect_donor_user_failure( self ):
        """A failed disconnect keeps the linkage."""

        with self.app.app_context():
            create_user( 12 )
            create_donor( 5, user_id=12, total_payments=1 )
            post_disconnect = mock.Mock()
            hooks.add_action( 'post_donor_disconnect_user_id', post_disconnect )

            with mock.patch.object( database.session, 'commit', side_effect=SQLAlchemyError( 'database is gone' ) ):
                output = disconnect_donor_user( 5 )

            self.assertFalse( output[ 'success' ] )
            self.assertEqual( output[ 'code' ], 'disconnect-failed' )
            post_disconnect.assert_called_once_with( 5 )
            self.assertEqual( database.session.get( DonorModel, 5 ).linked_user_id, 12 )
            self.assertEqual( self.get_payments( 5 )[ 0 ].user_id, 12 )

    def test_add_donor_email_rejections( self ):
        """Invalid, duplicate and taken email addresses are rejected."""

        with self.app.app_context():
            create_donor( 5, emails=[ 'ralph@kramden.org' ] )
            create_donor( 6, emails=[ 'alice@kramden.org' ] )
            post_add = mock.Mock()
            hooks.add_action( 'post_add_donor_email', post_add )

            with self.assertRaises( DonorEmailInvalidError ):
                add_donor_email( 5, 'not-an-email' )
            with self.assertRaises( DonorEmailDuplicateError ):
                add_donor_email( 5, 'ralph@kramden.org' )
            with self.assertRaises( DonorEmailDuplicateError ):
                add_donor_email( 5, 'ralph@KRAMDEN.org' )
            with self.assertRaises( DonorEmailTakenError ):
                add_donor_email( 5, 'alice@kramden.org' )
            with self.assertRaises( DonorRequestError ):
                add_donor_email( 5, '' )
            with self.assertRaises( DonorNotFoundError ):
                add_donor_email( 404, 'new@kramden.org' )

            self.assertEqual( database.session.get( DonorModel, 5 ).email_addresses, [ 'ralph@kramden.org' ] )
            self.assertEqual( DonorNoteModel.query.count(), 0 )
            post_add.assert_not_called()

    def test_add_donor_email_as_primary( self ):
        """A new primary email demotes the old one and two audit notes are written."""

        with self.app.app_context():
            create_donor( 7, emails=[ 'old@x.com' ] )
            post_add = mock.Mock()
            hooks.add_action( 'post_add_donor_email', post_add )

            output = add_donor_email( 7, 'a@b.com', True, 'apeters' )

            self.assertTrue( output[ 'success' ] )
            self.assertEqual( output[ 'code' ], 'email-added' )
            self.assertEqual( output[ 'redirect' ], '/admin/donors?view=overview&id=7&give-message=email-added' )
            post_add.assert_called_once_with( 7, 'a@b.com', True )

            donor = database.session.get( DonorModel, 7 )
            self.assertEqual( donor.email_addresses, [ 'old@x.com', 'a@b.com' ] )
            self.assertEqual( donor.primary_email, 'a@b.com' )
            self.assertEqual( [ email.is_primary for email in donor.emails ], [ False, True ] )
            self.assertEqual(
                [ note.note for note in donor.notes ],
                [ 'Email address a@b.com added by apeters', 'Email address a@b.com set as primary by apeters' ]
            )

    def test_add_donor_email_not_primary( self ):
        """A secondary email keeps the primary, the first email of a donor is always primary."""

        with self.app.app_context():
            create_donor( 7, emails=[ 'old@x.com' ] )
            create_donor( 8 )

            add_donor_email( 7, 'a@b.com', False, 'apeters' )
            add_donor_email( 8, 'first@b.com' )

            donor = database.session.get( DonorModel, 7 )
            self.assertEqual( donor.primary_email, 'old@x.com' )
            self.assertEqual( [ note.note for note in donor.notes ], [ 'Email address a@b.com added by apeters' ] )

            donor = database.session.get( DonorModel, 8 )
            self.assertEqual( donor.primary_email, 'first@b.com' )
            self.assertEqual( [ note.note for note in donor.notes ], [ 'Email address first@b.com added by System' ] )

    def test_add_donor_email_race_is_reported_as_taken( self ):
        """The unique constraint on the email closes the gap between the check and the write."""

        with self.app.app_context():
            create_donor( 5, emails=[ 'ralph@kramden.org' ] )
            create_donor( 6, emails=[ 'alice@kramden.org' ] )

            with mock.patch( 'donor_admin.controllers.donor.find_email_owner', return_value=None ):
                with self.assertRaises( DonorEmailTakenError ):
                    add_donor_email( 5, 'alice@kramden.org' )

            self.assertEqual( database.session.get( DonorModel, 5 ).email_addresses, [ 'ralph@kramden.org' ] )

    def test_remove_donor_email( self ):
        """Removing a secondary email keeps the primary and logs the removal."""

        with self.app.app_context():
            create_donor( 5, emails=[ 'ralph@kramden.org', 'ralph@gothambus.com' ] )

            output = remove_donor_email( 5, 'ralph@gothambus.com', 'apeters' )

            self.assertTrue( output[ 'success' ] )
            self.assertEqual( output[ 'code' ], 'email-removed' )
            self.assertIn( 'give-message=email-removed', output[ 'redirect' ] )
            donor = database.session.get( DonorModel, 5 )
            self.assertEqual( donor.email_addresses, [ 'ralph@kramden.org' ] )
            self.assertEqual( donor.primary_email, 'ralph@kramden.org' )
            self.assertEqual( [ note.note for note in donor.notes ], [ 'Email address ralph@gothambus.com removed by apeters' ] )

    def test_remove_donor_primary_email_promotes_oldest( self ):
        """Removing the primary promotes the oldest remaining email, removing the last leaves the set empty."""

        with self.app.app_context():
            create_donor( 5, emails=[ 'first@kramden.org', 'second@kramden.org', 'third@kramden.org' ] )
            set_donor_primary_email( 5, 'third@kramden.org', 'apeters' )

            remove_donor_email( 5, 'third@kramden.org', 'apeters' )

            donor = database.session.get( DonorModel, 5 )
            self.assertEqual( donor.primary_email, 'first@kramden.org' )
            self.assertEqual( sum( 1 for email in donor.emails if email.is_primary ), 1 )
            self.assertEqual( donor.notes[ -1 ].note, 'Email address first@kramden.org set as primary by apeters' )

            remove_donor_email( 5, 'first@kramden.org', 'apeters' )
            remove_donor_email( 5, 'second@kramden.org', 'apeters' )
            donor = database.session.get( DonorModel, 5 )
            self.assertEqual( donor.emails, [] )
            self.assertIsNone( donor.primary_email )

    def test_remove_donor_email_failures( self ):
        """An email that is not on the donor fails without changes, an invalid email raises."""

        with self.app.app_context():
            create_donor( 5, emails=[ 'ralph@kramden.org' ] )
            create_donor( 6, emails=[ 'alice@kramden.org' ] )

            output = remove_donor_email( 5, 'alice@kramden.org' )

            self.assertFalse( output[ 'success' ] )
            self.assertEqual( output[ 'code' ], 'email-remove-failed' )
            self.assertIn( 'give-message=email-remove-failed', output[ 'redirect' ] )
            self.assertEqual( DonorEmailModel.query.count(), 2 )
            self.assertEqual( DonorNoteModel.query.count(), 0 )

            with self.assertRaises( DonorEmailInvalidError ):
                remove_donor_email( 5, 'not-an-email' )
            with self.assertRaises( DonorNotFoundError ):
                remove_donor_email( 404, 'ralph@kramden.org' )

    def test_set_donor_primary_email( self ):
        """Promoting an email demotes the previous primary and logs it."""

        with self.app.app_context():
            create_donor( 5, emails=[ 'ralph@kramden.org', 'ralph@gothambus.com' ] )

            output = set_donor_primary_email( 5, 'ralph@gothambus.com', 'apeters' )

            self.assertTrue( output[ 'success' ] )
            self.assertEqual( output[ 'code' ], 'primary-email-updated' )
            donor = database.session.get( DonorModel, 5 )
            self.assertEqual( donor.primary_email, 'ralph@gothambus.com' )
            self.assertEqual( [ email.is_primary for email in donor.emails ], [ False, True ] )
            self.assertEqual(
                [ note.note for note in donor.notes ], [ 'Email address ralph@gothambus.com set as primary by apeters' ]
            )

            output = set_donor_primary_email( 5, 'nobody@kramden.org', 'apeters' )
            self.assertFalse( output[ 'success' ] )
            self.assertEqual( output[ 'code' ], 'primary-email-failed' )
            self.assertEqual( database.session.get( DonorModel, 5 ).primary_email, 'ralph@gothambus.com' )

            with self.assertRaises( DonorEmailInvalidError ):
                set_donor_primary_email( 5, 'not-an-email' )

    def test_get_donor( self ):
        """The overview holds the profile, the emails, the payments and the address of the linked user."""

        with self.app.app_context():
            create_user( 12, address={ 'city': 'Reno' } )
            create_donor( 5, user_id=12, emails=[ 'ralph@kramden.org' ], total_payments=2 )
            create_donor( 6 )

            donor_json = get_donor( 5 )

            self.assertEqual( donor_json[ 'id' ], 5 )
            self.assertEqual( donor_json[ 'user_id' ], 12 )
            self.assertEqual( donor_json[ 'primary_email' ], 'ralph@kramden.org' )
            self.assertEqual( len( donor_json[ 'payment_id_list' ] ), 2 )
            self.assertEqual( donor_json[ 'emails' ][ 0 ][ 'email' ], 'ralph@kramden.org' )
            self.assertEqual( donor_json[ 'address' ], dict( EMPTY_ADDRESS, city='Reno' ) )

            donor_json = get_donor( 6 )
            self.assertEqual( donor_json[ 'user_id' ], 0 )
            self.assertIsNone( donor_json[ 'address' ] )
            self.assertEqual( donor_json[ 'emails' ], [] )
