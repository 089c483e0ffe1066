"""
SQLite database implementation.
Simple and direct - no abstraction layers.

The WebhookEvent table keeps the camelCase column names consumers
already query against.
"""

import aiosqlite
import json
from datetime import datetime
from typing import List, Optional
import os

from .models import NewWebhookEvent, WebhookEvent, WebhookEventStatus


class SQLiteDatabase:
    """SQLite database for the webhook event queue."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create database connection."""
        if self._connection is None:
            os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        return self._connection

    async def initialize(self) -> None:
        """Create database tables."""
        conn = await self._get_connection()

        await conn.executescript("""
            CREATE TABLE IF NOT EXISTS "WebhookEvent" (
                "id" TEXT PRIMARY KEY,
                "topic" TEXT NOT NULL,
                "shop" TEXT NOT NULL,
                "webhookId" TEXT,
                "apiVersion" TEXT,
                "payload" TEXT NOT NULL,
                "status" TEXT NOT NULL DEFAULT 'PENDING'
                    CHECK ("status" IN ('PENDING', 'PROCESSING', 'SUCCEEDED', 'FAILED')),
                "attempts" INTEGER NOT NULL DEFAULT 0,
                "lastError" TEXT,
                "createdAt" TEXT NOT NULL,
                "processedAt" TEXT
            );

            CREATE INDEX IF NOT EXISTS "WebhookEvent_status_createdAt_idx"
                ON "WebhookEvent"("status", "createdAt");
            CREATE INDEX IF NOT EXISTS "WebhookEvent_shop_topic_createdAt_idx"
                ON "WebhookEvent"("shop", "topic", "createdAt");
        """)
        await conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    # ===== Helper Methods =====

    def _row_to_webhook_event(self, row: aiosqlite.Row) -> WebhookEvent:
        """Convert a database row to a WebhookEvent model."""
        processed_at = None
        if row["processedAt"]:
            processed_at = datetime.fromisoformat(row["processedAt"])

        return WebhookEvent(
            id=row["id"],
            topic=row["topic"],
            shop=row["shop"],
            webhook_id=row["webhookId"],
            api_version=row["apiVersion"],
            payload=json.loads(row["payload"]),
            status=WebhookEventStatus(row["status"]),
            attempts=row["attempts"],
            last_error=row["lastError"],
            created_at=datetime.fromisoformat(row["createdAt"]),
            processed_at=processed_at
        )

    # ===== Webhook Event Operations =====

    async def insert_webhook_event(self, new_event: NewWebhookEvent) -> str:
        """
        Enqueue a webhook event in state PENDING.

        The row is committed before this returns, so callers may
        acknowledge the delivery afterwards.

        Returns:
            The generated event id
        """
        event = WebhookEvent(**new_event.model_dump())

        conn = await self._get_connection()
        await conn.execute(
            """
            INSERT INTO "WebhookEvent" ("id", "topic", "shop", "webhookId", "apiVersion",
                                        "payload", "status", "attempts", "lastError",
                                        "createdAt", "processedAt")
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                event.id,
                event.topic,
                event.shop,
                event.webhook_id,
                event.api_version,
                json.dumps(event.payload),
                event.status.value,
                event.attempts,
                None,
                event.created_at.isoformat(),
                None
            )
        )
        await conn.commit()
        return event.id

    async def get_webhook_event(self, event_id: str) -> Optional[WebhookEvent]:
        conn = await self._get_connection()
        cursor = await conn.execute('SELECT * FROM "WebhookEvent" WHERE "id" = ?', (event_id,))
        row = await cursor.fetchone()
        return self._row_to_webhook_event(row) if row else None

    async def list_webhook_events(
        self,
        shop: Optional[str] = None,
        topic: Optional[str] = None,
        status: Optional[WebhookEventStatus] = None,
        limit: int = 50
    ) -> List[WebhookEvent]:
        """List events oldest first, for audit and debugging."""
        conn = await self._get_connection()

        query = 'SELECT * FROM "WebhookEvent" WHERE 1=1'
        params = []

        if shop:
            query += ' AND "shop" = ?'
            params.append(shop)

        if topic:
            query += ' AND "topic" = ?'
            params.append(topic)

        if status:
            query += ' AND "status" = ?'
            params.append(status.value)

        query += ' ORDER BY "createdAt" ASC, rowid ASC LIMIT ?'
        params.append(limit)

        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()
        return [self._row_to_webhook_event(row) for row in rows]

    async def count_webhook_events(self) -> int:
        conn = await self._get_connection()
        cursor = await conn.execute('SELECT COUNT(*) FROM "WebhookEvent"')
        row = await cursor.fetchone()
        return row[0]
