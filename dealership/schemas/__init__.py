from .users import *
from .repairs import *
from .sales import *
