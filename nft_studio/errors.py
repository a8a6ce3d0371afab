# errors.py


class ConfigurationError(ValueError):
    """Inputs are unusable; raised before any image work starts."""


class DnaExhaustion(RuntimeError):
    def __init__(self, slot, attempts):
        super().__init__(f"Could not generate unique DNA for #{slot} after {attempts} attempts")
        self.slot = slot
        self.attempts = attempts


class AssetLoadWarning(UserWarning):
    """
    An image could not be decoded.
    owner_id: trait or legendary id the image belongs to
    label: human readable 'Layer:Trait' or legendary name
    """

    def __init__(self, owner_id, label, reason):
        super().__init__(f"Missing image for '{label}': {reason}")
        self.owner_id = owner_id
        self.label = label
        self.reason = reason
