##########################################################################################
#
# Script name: errors.py
#
# Description: Exceptions raised by the weather news feed.
#
##########################################################################################


class Error(Exception):
    '''
    Base class for exceptions in this package.
    '''
    pass


class InvalidTemperatureError(Error, ValueError):
    '''
    Raised when a temperature is not a finite real number.
    '''
    def __init__(self, value):
        self.value = value
        self.message = f"Temperature must be a finite number, got {value!r}"
        super().__init__(self.message)


class ConfigError(Error):
    '''
    Raised for invalid settings, lexicons or missing API keys.
    '''
    pass


class FetchError(Error):
    '''
    Raised when an upstream weather or news request fails.
    '''
    def __init__(self, message, url=None):
        self.message = message
        self.url = url
        super().__init__(self.message)
