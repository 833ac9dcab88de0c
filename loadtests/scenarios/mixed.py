"""Mixed workload scenario.

Weights model a dinner rush: mostly customers ordering, a steady stream of
chef transitions, and an occasional admin reading the ledger. This is the
recommended scenario for a load baseline.
"""

from locust import HttpUser, between

from loadtests.scenarios.ordering import CartBrowsingJourney, CheckoutAndPayJourney, KitchenQueueJourney


class MixedWorkloadUser(HttpUser):
    wait_time = between(0.5, 3.0)
    tasks = {
        CartBrowsingJourney: 25,
        CheckoutAndPayJourney: 50,
        KitchenQueueJourney: 25,
    }
