"""Subscriptions page - creator plans and user subscriptions."""

from typing import Any, Dict

import streamlit as st

from backoffice.console.components.feedback import status_badge
from backoffice.console.components.resource_list import (
    ListPage,
    confirm_prompt,
    render_resource_list,
    run_mutation,
)
from backoffice.console.runtime import ConsoleRuntime
from backoffice.console.session import ConsoleSession
from backoffice.shared.domain.listing.filters import PLAN_FILTER, SUBSCRIPTION_FILTER
from backoffice.shared.domain.query.cache import Mutation

PLANS_KEY = "subscriptionPlans"
SUBSCRIPTIONS_KEY = "subscriptions"


class SubscriptionsPage:
    """Subscriptions page implementation."""

    def __init__(self, runtime: ConsoleRuntime, session: ConsoleSession):
        self.runtime = runtime
        self.session = session
        self.api = runtime.services.api
        cache = runtime.services.cache

        self.create_plan = Mutation(self.api.subscriptions.create_plan, cache=cache, invalidates=(PLANS_KEY,))
        self.update_plan = Mutation(self.api.subscriptions.update_plan, cache=cache, invalidates=(PLANS_KEY,))
        self.delete_plan = Mutation(self.api.subscriptions.delete_plan, cache=cache, invalidates=(PLANS_KEY,))
        self.cancel = Mutation(
            self.api.subscriptions.cancel_subscription,
            cache=cache,
            invalidates=(SUBSCRIPTIONS_KEY,),
        )

    def render(self):
        st.header("💳 Subscriptions")
        st.markdown("Manage subscription plans and user subscriptions.")

        tab_plans, tab_subs = st.tabs(["📋 Plans", "👥 User Subscriptions"])
        with tab_plans:
            self._render_create_plan()
            render_resource_list(self.runtime, self.session, ListPage(
                key=PLANS_KEY,
                fetcher=self.api.subscriptions.list_plans,
                resource_filter=PLAN_FILTER,
                noun="plans",
                render_row=self._render_plan,
                search_placeholder="Search plans...",
                empty_message="No subscription plans yet.",
            ))
        with tab_subs:
            render_resource_list(self.runtime, self.session, ListPage(
                key=SUBSCRIPTIONS_KEY,
                fetcher=self.api.subscriptions.list_subscriptions,
                resource_filter=SUBSCRIPTION_FILTER,
                noun="subscriptions",
                render_row=self._render_subscription,
                search_placeholder="Search by plan, creator or subscriber...",
                empty_message="No subscriptions match your filters.",
            ))

    def _render_create_plan(self):
        with st.expander("➕ Create plan"):
            with st.form("create_plan_form", clear_on_submit=True):
                name = st.text_input("Name")
                description = st.text_area("Description", height=80)
                col1, col2, col3 = st.columns(3)
                with col1:
                    price = st.number_input("Price", min_value=0.0, step=0.5, format="%.2f")
                with col2:
                    currency = st.text_input("Currency", value="USD")
                with col3:
                    duration_days = st.number_input("Duration (days)", min_value=1, value=30, step=1)
                submitted = st.form_submit_button("Create plan", type="primary")

            if not submitted:
                return
            if not name.strip():
                st.warning("Plan name is required.")
                return

            data = {
                "name": name.strip(),
                "description": description.strip(),
                "price": price,
                "currency": currency.strip().upper() or "USD",
                "duration_days": int(duration_days),
                "features": {},
            }
            if run_mutation(self.runtime, self.create_plan, "create plan", data, success_message="Plan created"):
                st.rerun()

    def _render_plan(self, plan: Dict[str, Any]):
        plan_id = plan.get("id")
        active = bool(plan.get("is_active"))
        col1, col2 = st.columns([4, 2])

        with col1:
            st.markdown(f"**{plan.get('name', 'Unnamed plan')}** {status_badge('active' if active else 'inactive')}")
            st.caption(
                f"${plan.get('price', 0)} {plan.get('currency', 'USD')} · {plan.get('duration_days', 30)} days"
            )
            if plan.get("description"):
                st.markdown(plan["description"])

        with col2:
            b1, b2 = st.columns(2)
            with b1:
                label = "⏸️ Deactivate" if active else "▶️ Activate"
                if st.button(label, key=f"toggle_plan_{plan_id}"):
                    if run_mutation(
                        self.runtime, self.update_plan, "update plan", plan_id, {"is_active": not active},
                        success_message="Plan updated",
                    ):
                        st.rerun()
            with b2:
                if st.button("🗑️", key=f"delete_plan_{plan_id}", help="Delete"):
                    self.session.request_confirm("delete_plan", plan_id)

        if confirm_prompt(self.session, "delete_plan", plan_id, f"Delete plan **{plan.get('name')}**?"):
            if run_mutation(self.runtime, self.delete_plan, "delete plan", plan_id, success_message="Plan deleted"):
                st.rerun()

    def _render_subscription(self, subscription: Dict[str, Any]):
        subscription_id = subscription.get("id")
        status = subscription.get("status", "active")
        col1, col2 = st.columns([5, 1])

        with col1:
            subscriber = subscription.get("subscriber_alias") or subscription.get("subscriber_username", "unknown")
            creator = subscription.get("creator_alias") or subscription.get("creator_username", "unknown")
            st.markdown(f"**{subscriber}** → **{creator}** {status_badge(status)}")
            st.caption(
                f"{subscription.get('plan_name', 'Plan')} · ${subscription.get('plan_price', 0)} · "
                f"since {subscription.get('start_date', 'unknown')}"
            )

        with col2:
            if status == "active" and st.button("Cancel", key=f"cancel_subscription_{subscription_id}"):
                self.session.request_confirm("cancel_subscription", subscription_id)

        if confirm_prompt(self.session, "cancel_subscription", subscription_id, "Cancel this subscription?"):
            if run_mutation(
                self.runtime, self.cancel, "cancel subscription", subscription_id,
                success_message="Subscription cancelled",
            ):
                st.rerun()


def render_subscriptions(runtime: ConsoleRuntime, session: ConsoleSession):
    """Render function for the Subscriptions page."""
    page = SubscriptionsPage(runtime, session)
    page.render()
