"""Promotion credit & reward economy service"""
