#!/usr/bin/env python

"""Command line interface(s) for the docker_registry_inspect package."""

from .dri import cli as dri_cli
