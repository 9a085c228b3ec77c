"""
Evo Foragers: genetic search for lookup-table policies that collect rewards
on a walled grid.
"""
