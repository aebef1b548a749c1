"""A module to facilitate serialization and deserialization of a model given its schema."""


def from_json( model_schema, model_dictionary, create=True ):
    """Takes the model_dictionary and deserializes it into the model using its Marshmallow schema: model_schema.

    SQLAlchemy database.session.add() creates a new object if an ID is not provided, and updates an object if an ID is
    provided. Which operation is performed is determined by the value of create. If create is true, the ID is removed
    from the fields of the Model. If create is False, the model will be updated, and the dictionary must have the ID.

    :param obj model_schema: This is a Marshmallow schema to be used for 2-way serialization.
    :param dict model_dictionary: The dictionary that is to be deserialized by the schema.
    :param bool create: Whether create or update the model. Default is to create.
    :return: The model instance.
    """

    fields = [ column.key for column in model_schema.Meta.model.__table__.columns ]
    if create:
        primary_keys = [ column.key for column in model_schema.Meta.model.__table__.primary_key.columns ]
        # A natural primary key, e.g. the user_id of an address, is kept.
        if primary_keys == [ 'id' ]:
            fields.remove( 'id' )

    model_json = {}
    for field in fields:
        if field in model_dictionary:
            model_json[ field ] = model_dictionary[ field ]

    return model_schema.load( model_json )
