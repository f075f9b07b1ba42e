from pydantic import model_validator


def record_type_validator():
    """
    Validator factory naming the view model class in a ``record_type`` field after validation, so that clients can
    tell serialized records apart.
    """
    return model_validator(mode="after")


def set_record_type(self):
    self.record_type = type(self).__name__
    return self
