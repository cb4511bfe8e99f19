"""
External service adapters for the tool lending module.
The Supabase identity adapter is imported from its module on demand.
"""
