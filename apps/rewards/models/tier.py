from django.db import models


class Tier(models.IntegerChoices):
    """Reward tiers, ordered by the lifetime points needed to reach them"""
    BRONZE = 1, 'Bronze'
    SILVER = 2, 'Silver'
    GOLD = 3, 'Gold'
    PLATINUM = 4, 'Platinum'
    DIAMOND = 5, 'Diamond'
