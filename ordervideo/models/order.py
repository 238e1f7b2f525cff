"""Order video model.

One row per platform order: the opaque order id and the video assigned to
it. Rows are written by upsert only (see services.order_video_store) and
never deleted.
"""

from ordervideo.extensions import db


class OrderVideo(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Text, primary_key=True)  # platform order id, stored as text
    video_url = db.Column(db.Text, nullable=False)

    def __repr__(self):
        return f"<OrderVideo {self.id} -> {self.video_url}>"
