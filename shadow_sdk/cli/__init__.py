"""Command line interface for shadow-sdk"""
