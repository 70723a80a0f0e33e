"""Arlo enrolment plugin: configuration store and privacy provider."""

COMPONENT = "enrol_arlo"
ENROL_NAME = "arlo"
