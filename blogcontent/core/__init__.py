"""Configuration, logging, errors and shared infrastructure"""
