"""Custom exceptions for MiniSocial"""


class MiniSocialError(Exception):
    """Base exception for MiniSocial"""
    pass


class ConfigError(MiniSocialError):
    """Configuration error"""
    pass


class MissingFieldsError(MiniSocialError):
    """Required sign-up fields were left blank"""
    pass


class DuplicateEmailError(MiniSocialError):
    """Email is already registered"""
    
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email '{email}' is already registered")


class InvalidCredentialsError(MiniSocialError):
    """No user matches the given email and password"""
    
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class NotAuthenticatedError(MiniSocialError):
    """Operation requires an active session"""
    
    def __init__(self, message: str = "Login required"):
        super().__init__(message)


class NotAuthorizedError(MiniSocialError):
    """Session is not allowed to perform the operation"""
    pass


class NotFoundError(MiniSocialError):
    """Referenced post does not exist"""
    
    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"Post '{post_id}' not found")


class EmptyPostError(MiniSocialError):
    """Post has neither text nor image"""
    
    def __init__(self, message: str = "Post must have text or an image"):
        super().__init__(message)


class EmptyCommentError(MiniSocialError):
    """Comment text is blank"""
    
    def __init__(self, message: str = "Comment text cannot be empty"):
        super().__init__(message)


class InvalidSortModeError(MiniSocialError, ValueError):
    """Unknown feed sort mode"""
    
    def __init__(self, sort_mode: str):
        self.sort_mode = sort_mode
        super().__init__(f"Unknown sort mode '{sort_mode}'")
