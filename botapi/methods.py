"""Remote method names, as they appear in the request path ``/bot<token>/<method>``."""

GET_ME = "getMe"
SEND_MESSAGE = "sendMessage"
SEND_DOCUMENT = "sendDocument"
SEND_ANIMATION = "sendAnimation"
SEND_MEDIA_GROUP = "sendMediaGroup"
RESTRICT_CHAT_MEMBER = "restrictChatMember"
PROMOTE_CHAT_MEMBER = "promoteChatMember"
GET_CHAT_MEMBER = "getChatMember"
GET_CHAT_ADMINISTRATORS = "getChatAdministrators"
DELETE_FORUM_TOPIC = "deleteForumTopic"
CLOSE_GENERAL_FORUM_TOPIC = "closeGeneralForumTopic"
ANSWER_INLINE_QUERY = "answerInlineQuery"
