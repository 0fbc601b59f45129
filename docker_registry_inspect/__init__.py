#!/usr/bin/env python

"""Utilities for inspecting and measuring the content of a docker registry."""

from .exceptions import *
from .layer import *
from .manifest import *
from .registryclient import *
from .sizereport import *
from .specs import *
from .transport import *
from .utils import *

__version__ = "1.0.0"
