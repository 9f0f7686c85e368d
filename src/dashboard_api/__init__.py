"""Storefront Dashboard API - read-only analytics for the admin dashboard."""
