"""Create messages table with read-only RLS policy and realtime publication.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "messages",
        sa.Column("id", UUID(as_uuid=False), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("user_id", UUID(as_uuid=False), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("char_length(content) BETWEEN 1 AND 1000", name="messages_content_length"),
    )
    op.create_index("ix_messages_created_at", "messages", ["created_at"])
    op.create_index("ix_messages_user_id", "messages", ["user_id"])
    op.execute(
        "ALTER TABLE messages ADD CONSTRAINT messages_user_id_fkey "
        "FOREIGN KEY (user_id) REFERENCES auth.users(id) ON DELETE CASCADE"
    )

    # Signed-in users may read every message; there is no insert/update/delete policy,
    # so only the secret key (which bypasses RLS) can write.
    op.execute("ALTER TABLE messages ENABLE ROW LEVEL SECURITY")
    op.execute(
        "CREATE POLICY messages_select_authenticated ON messages "
        "FOR SELECT TO authenticated USING (true)"
    )

    # Broadcast INSERTs to realtime subscribers
    op.execute("ALTER PUBLICATION supabase_realtime ADD TABLE messages")


def downgrade() -> None:
    op.execute("ALTER PUBLICATION supabase_realtime DROP TABLE messages")
    op.execute("DROP POLICY IF EXISTS messages_select_authenticated ON messages")
    op.drop_index("ix_messages_user_id", table_name="messages")
    op.drop_index("ix_messages_created_at", table_name="messages")
    op.drop_table("messages")
