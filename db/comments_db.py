from bson import ObjectId

from db import COMMENTS


async def delete_comments_for_video(db, video_id: ObjectId) -> int:
    res = await db[COMMENTS].delete_many({"video": video_id})
    return res.deleted_count
