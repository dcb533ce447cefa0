"""Background scheduling of cart stock reconciliation passes."""

import asyncio
import logging
import random
import time
from collections.abc import Callable
from enum import Enum

from storefront_core.cart.reconciliation import StockReconciler
from storefront_core.config import Settings
from storefront_core.models.cart import CartItem
from storefront_core.observability.logging import LogContext

logger = logging.getLogger(__name__)


class TriggerReason(str, Enum):
    """What initiated a reconciliation attempt."""

    MOUNT = "mount"
    INTERVAL = "interval"
    FOCUS = "focus"
    VISIBLE = "visible"
    MANUAL = "manual"


class ReconciliationScheduler:
    """
    Runs reconciliation passes on mount, on a timer, and on focus/visibility events.

    Throttling is a last-attempted timestamp guard: a trigger arriving within
    ``throttle`` seconds of the previous attempt is dropped, not queued, and so is
    any trigger arriving while a pass is still in flight. Passes are
    skipped while the cart is empty, and the mount pass runs again whenever the cart
    goes from empty to non-empty while the scheduler is running.
    """

    def __init__(
        self,
        reconciler: StockReconciler,
        interval: float = 30.0,
        throttle: float = 5.0,
        jitter: float = 0.0,
        auto_resolve: bool = True,
        sync_on_mount: bool = True,
        sync_on_focus: bool = True,
        sync_on_visible: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            reconciler: Performs the actual passes.
            interval: Seconds between periodic passes.
            throttle: Minimum seconds between two attempts.
            jitter: Maximum random delay added to each periodic wait.
            auto_resolve: Resolve issues automatically after each successful pass.
            sync_on_mount: Attempt a pass when started.
            sync_on_focus: Attempt a pass when the window regains focus.
            sync_on_visible: Attempt a pass when the page becomes visible.
            clock: Monotonic time source in seconds.
        """
        self.reconciler = reconciler
        self.interval = interval
        self.throttle = throttle
        self.jitter = jitter
        self.auto_resolve = auto_resolve
        self.sync_on_mount = sync_on_mount
        self.sync_on_focus = sync_on_focus
        self.sync_on_visible = sync_on_visible
        self.clock = clock

        self._last_attempt: float | None = None
        self._last_sync: float | None = None
        self._running = False
        self._in_flight = False
        self._task: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()
        self._unsubscribe: Callable[[], None] | None = None
        self._cart_was_empty = True

    @classmethod
    def from_settings(cls, reconciler: StockReconciler, settings: Settings) -> "ReconciliationScheduler":
        return cls(
            reconciler,
            interval=settings.stock_sync_interval,
            throttle=settings.stock_sync_throttle,
            jitter=settings.stock_sync_jitter,
            auto_resolve=settings.stock_auto_resolve,
            sync_on_mount=settings.sync_on_mount,
            sync_on_focus=settings.sync_on_focus,
            sync_on_visible=settings.sync_on_visible,
        )

    @property
    def is_active(self) -> bool:
        """True while the cart has items to reconcile."""
        return not self.reconciler.cart.is_empty

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> bool:
        """True while a reconciliation pass is awaiting its stock snapshot."""
        return self._in_flight

    @property
    def last_sync(self) -> float | None:
        """Clock value of the last successful pass."""
        return self._last_sync

    def _throttled(self, now: float) -> bool:
        return self._last_attempt is not None and now - self._last_attempt < self.throttle

    async def trigger(self, reason: TriggerReason = TriggerReason.MANUAL) -> bool:
        """
        Attempt a reconciliation pass.

        Returns:
            True if a pass ran and succeeded; False if it was throttled, overlapped
            a pass in flight, skipped for an empty cart, or failed.
        """
        if self._in_flight:
            logger.debug(f"Reconciliation trigger '{reason.value}' dropped, a pass is in flight")
            return False

        now = self.clock()
        if self._throttled(now):
            logger.debug(f"Reconciliation trigger '{reason.value}' dropped by throttle")
            return False
        self._last_attempt = now

        if not self.is_active:
            return False

        self._in_flight = True
        try:
            with LogContext(trigger=reason.value):
                try:
                    issues = await self.reconciler.reconcile()
                except Exception:
                    logger.exception("Unexpected error during stock reconciliation")
                    return False

                if issues is None:
                    return False

                self._last_sync = self.clock()
                if issues and self.auto_resolve:
                    self.reconciler.auto_resolve()
            return True
        finally:
            self._in_flight = False

    async def start(self) -> None:
        """Start periodic reconciliation, running the mount trigger first if enabled."""
        if self._running:
            return
        self._running = True
        self.reconciler.open()
        self._cart_was_empty = self.reconciler.cart.is_empty
        self._unsubscribe = self.reconciler.cart.subscribe(self._on_cart_change)

        logger.info(
            f"Starting stock reconciliation: interval={self.interval}s, throttle={self.throttle}s"
        )
        if self.sync_on_mount and self.is_active:
            await self.trigger(TriggerReason.MOUNT)

        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        """Stop scheduling; results of an in-flight pass are discarded."""
        if not self._running:
            return
        self._running = False
        self.reconciler.close()

        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

        tasks = [task for task in (self._task, *self._pending) if task]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._task = None
        self._pending.clear()

        logger.info("Stock reconciliation stopped")

    def _on_cart_change(self, items: tuple[CartItem, ...]) -> None:
        """Run the mount pass when the cart stops being empty."""
        was_empty, self._cart_was_empty = self._cart_was_empty, not items
        if not (was_empty and items and self._running and self.sync_on_mount):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Cart filled outside the event loop; waiting for the next interval")
            return
        task = loop.create_task(self.trigger(TriggerReason.MOUNT))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _loop(self) -> None:
        while self._running:
            try:
                delay = self.interval + (random.uniform(0, self.jitter) if self.jitter else 0.0)
                await asyncio.sleep(delay)
                if not self._running:
                    break
                await self.trigger(TriggerReason.INTERVAL)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.exception(f"Error in reconciliation loop: {e}")

    async def on_focus(self) -> bool:
        if not self.sync_on_focus:
            return False
        return await self.trigger(TriggerReason.FOCUS)

    async def on_visibility_change(self, hidden: bool) -> bool:
        if hidden or not self.sync_on_visible:
            return False
        return await self.trigger(TriggerReason.VISIBLE)

    async def manual_sync(self) -> bool:
        return await self.trigger(TriggerReason.MANUAL)
