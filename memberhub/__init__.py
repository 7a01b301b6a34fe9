"""memberhub: accounts, stores, influencers, memberships and their social edges."""
