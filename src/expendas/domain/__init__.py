"""Domain layer for expendas application.

Services live in their own modules (``expendas.domain.account``,
``expendas.domain.payment``) and are imported from there, since they depend
on ``expendas.database`` which in turn imports the entities defined here.
"""
