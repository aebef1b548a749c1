"""Extension points fired around donor mutations: ordered action and filter listeners registered per application.

Actions are observers: each listener is called with the event payload and its return value is ignored. Filters
transform a value: each listener receives the output of the previous one together with the event payload.

    hooks.add_action( 'post_edit_donor', audit_listener )
    hooks.add_filter( 'edit_donor_info', lambda donor_data, donor_id: donor_data, priority=5 )

Listeners run synchronously, ordered by priority ( lowest first ) and then by registration order.

The pre_ actions fire after validation, immediately before the write. post_edit_donor and
post_donor_disconnect_user_id fire after the write whether it succeeded or failed; post_edit_donor receives the donor
data merged with the address after a success and the donor data alone after a failure. post_add_donor_email fires
only once the email was added, never for a rejected or failed add.
"""
import itertools

from flask import current_app

DONOR_ACTIONS = (
    'pre_edit_donor',
    'post_edit_donor',
    'pre_insert_donor_note',
    'pre_delete_donor',
    'pre_donor_disconnect_user_id',
    'post_donor_disconnect_user_id',
    'post_add_donor_email'
)
DONOR_FILTERS = ( 'edit_donor_info', 'edit_donor_address' )
DEFAULT_PRIORITY = 10


class HookRegistry:
    """The listeners registered on one application."""

    def __init__( self ):
        self._listeners = { name: [] for name in DONOR_ACTIONS + DONOR_FILTERS }
        self._counter = itertools.count()

    def _register( self, name, callback, priority ):
        if name not in self._listeners:
            raise KeyError( 'Unknown donor extension point: {}'.format( name ) )
        self._listeners[ name ].append( ( priority, next( self._counter ), callback ) )
        self._listeners[ name ].sort( key=lambda listener: listener[ :2 ] )

    def add_action( self, name, callback, priority=DEFAULT_PRIORITY ):
        """Register an observer for an action."""

        if name not in DONOR_ACTIONS:
            raise KeyError( 'Unknown donor action: {}'.format( name ) )
        self._register( name, callback, priority )

    def add_filter( self, name, callback, priority=DEFAULT_PRIORITY ):
        """Register a transforming listener for a filter."""

        if name not in DONOR_FILTERS:
            raise KeyError( 'Unknown donor filter: {}'.format( name ) )
        self._register( name, callback, priority )

    def remove( self, name, callback ):
        """Unregister every registration of callback on the extension point."""

        self._listeners[ name ] = [
            listener for listener in self._listeners[ name ] if listener[ 2 ] is not callback
        ]

    def clear( self ):
        """Unregister all listeners."""

        for name in self._listeners:
            self._listeners[ name ] = []

    def listeners( self, name ):
        """The callbacks registered on the extension point in the order they will be called."""

        return [ listener[ 2 ] for listener in self._listeners[ name ] ]

    def do_action( self, name, *args ):
        """Call every observer of the action with args."""

        for callback in self.listeners( name ):
            callback( *args )

    def apply_filters( self, name, value, *args ):
        """Pass value through every listener of the filter and return the result."""

        for callback in self.listeners( name ):
            value = callback( value, *args )
        return value


class DonorHooks:
    """Flask extension giving access to the HookRegistry of the current application."""

    def __init__( self, app=None ):
        if app is not None:
            self.init_app( app )

    def init_app( self, app ):
        """Attach a fresh registry to the application."""

        app.extensions[ 'donor_hooks' ] = HookRegistry()

    @property
    def registry( self ):
        """The registry of the application in context."""

        return current_app.extensions[ 'donor_hooks' ]

    def add_action( self, name, callback, priority=DEFAULT_PRIORITY ):
        self.registry.add_action( name, callback, priority )

    def add_filter( self, name, callback, priority=DEFAULT_PRIORITY ):
        self.registry.add_filter( name, callback, priority )

    def remove( self, name, callback ):
        self.registry.remove( name, callback )

    def do_action( self, name, *args ):
        self.registry.do_action( name, *args )

    def apply_filters( self, name, value, *args ):
        return self.registry.apply_filters( name, value, *args )
