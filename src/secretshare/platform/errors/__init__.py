from .secretshare_error import SecretShareError

__all__ = ["SecretShareError"]
