class CytomineException(Exception):
    """
    Base class for exceptions in this module.
    """
    pass


class UsageError(CytomineException):
    """
    Exception raised when an operation is called without the identity or context it needs.
    For instance, when updating an entity that was never saved.
    It is always raised before any request is sent to the server.
    """
    pass


class MissingFilterError(UsageError):
    """
    Exception raised when listing a collection that cannot be fetched without a filter.
    """

    def __init__(self, collection_name: str, allowed_filters: tuple[str, ...]):
        super().__init__()
        self.collection_name = collection_name
        self.allowed_filters = allowed_filters

    def __str__(self):
        return f"{self.collection_name} cannot be fetched without a filter. " + \
            f"Allowed filters: {', '.join(self.allowed_filters)}"


class SessionNotInitializedError(UsageError):
    """
    Exception raised when no session was given and no default session was created.
    """
    pass


class OperationNotAllowedError(CytomineException):
    """
    Exception raised when calling an operation that the entity type does not support,
    such as updating an annotation term.
    """

    def __init__(self, entity_type: str, operation: str):
        super().__init__()
        self.entity_type = entity_type
        self.operation = operation

    def __str__(self):
        return f"A {self.entity_type} instance cannot be {self.operation}d."


class ResourceNotFoundError(CytomineException):
    """
    Exception raised when a resource is not found.
    For instance, when trying to get a resource by a non-existing id.
    """

    def __init__(self,
                 resource_type: str,
                 params: dict):
        """ Constructor.

        Args:
            resource_type (str): A resource type.
            params (dict): Dict of params identifying the sought resource.
        """
        super().__init__()
        self.resource_type = resource_type
        self.params = params

    def set_params(self, resource_type: str, params: dict):
        self.resource_type = resource_type
        self.params = params

    def __str__(self):
        return f"Resource '{self.resource_type}' not found for parameters: {self.params}"


class EntityAlreadyExistsError(CytomineException):
    """
    Exception raised when the server refuses a creation because the entity already exists.
    """

    def __init__(self, entity_type: str, params: dict):
        super().__init__()
        self.entity_type = entity_type
        self.params = params

    def __str__(self):
        return f"Entity '{self.entity_type}' already exists for parameters: {self.params}"


class InvalidResponseError(CytomineException):
    """
    Exception raised when a server response cannot be decoded into an entity.
    """
    pass
