"""The following script will DROP ALL tables and then CREATE ALL.

Use with caution! It will remove all existing data, and then reconstruct the tables with no entries. Other functions
can be added to manage other database tasks. To run a function navigate to the project root and, for example, on the
command line type:

python -c "import scripts.manage_donors_db;scripts.manage_donors_db.drop_all_and_create()"
python -c "import scripts.manage_donors_db;scripts.manage_donors_db.create_database_tables()"
"""
from donor_admin.app import create_app
from donor_admin.flask_essentials import database
from donor_admin.schemas.donor import DonorEmailSchema
from donor_admin.schemas.donor import DonorSchema
from donor_admin.schemas.payment import PaymentSchema
from donor_admin.schemas.user import UserAddressSchema
from donor_admin.schemas.user import UserSchema
from tests.helpers.default_dictionaries import get_donor_dict
from tests.helpers.default_dictionaries import get_donor_email_dict
from tests.helpers.default_dictionaries import get_payment_dict
from tests.helpers.default_dictionaries import get_user_address_dict
from tests.helpers.default_dictionaries import get_user_dict

app = create_app( 'DEV' )  # pylint: disable=C0103

TOTAL_USERS = 10
TOTAL_DONORS = 20
PAYMENTS_PER_DONOR = 3


def drop_all_and_create():
    """A function to drop and then recreate the database tables."""

    with app.app_context():
        database.reflect()
        database.drop_all()
        database.create_all()


def create_database_tables():
    """Function to create the donor admin tables and fill them with users, donors, emails and payments.

    The first TOTAL_USERS donors are linked to the user with the same ID, and that user has an address. The rest of
    the donors are not linked. Every donor gets a primary email and PAYMENTS_PER_DONOR payments, whose IDs are stored
    on the donor.
    """

    with app.app_context():
        drop_all_and_create()

        for user_id in range( 1, TOTAL_USERS + 1 ):
            user_json = get_user_dict( {
                'user_login': 'user{}'.format( user_id ),
                'display_name': 'User {}'.format( user_id ),
                'email': 'user{}@donors.org'.format( user_id )
            } )
            user_model = UserSchema().load( user_json )
            user_model.id = user_id
            database.session.add( user_model )

            address_json = get_user_address_dict( { 'line1': '{} Chauncey St'.format( user_id ), 'city': 'Brooklyn' } )
            address_json[ 'user_id' ] = user_id
            database.session.add( UserAddressSchema().load( address_json ) )
        database.session.flush()

        for donor_id in range( 1, TOTAL_DONORS + 1 ):
            user_id = donor_id if donor_id <= TOTAL_USERS else 0
            donor_json = get_donor_dict( { 'name': 'Donor {}'.format( donor_id ), 'user_id': user_id } )
            del donor_json[ 'id' ]
            donor_model = DonorSchema().load( donor_json )
            donor_model.id = donor_id
            database.session.add( donor_model )
            database.session.flush()

            email_json = get_donor_email_dict( { 'donor_id': donor_id, 'email': 'donor{}@donors.org'.format( donor_id ) } )
            del email_json[ 'id' ]
            database.session.add( DonorEmailSchema().load( email_json ) )

            payment_models = []
            for _ in range( PAYMENTS_PER_DONOR ):
                payment_json = get_payment_dict( { 'donor_id': donor_id, 'user_id': user_id } )
                del payment_json[ 'id' ]
                payment_models.append( PaymentSchema().load( payment_json ) )
            database.session.add_all( payment_models )
            database.session.flush()

            donor_model.payment_id_list = [ payment_model.id for payment_model in payment_models ]
            donor_model.purchase_count = len( payment_models )
            donor_model.purchase_value = sum( payment_model.amount for payment_model in payment_models )

        database.session.commit()
