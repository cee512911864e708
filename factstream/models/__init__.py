from factstream.models.topic import Topic, UserTopicSubscription, UserProfile
from factstream.models.claim import Claim, ClaimTopic, SourceCitation, Comment, VerificationTransition
from factstream.models.reaction import Reaction

__all__ = [
    'Topic', 'UserTopicSubscription', 'UserProfile',
    'Claim', 'ClaimTopic', 'SourceCitation', 'Comment', 'VerificationTransition',
    'Reaction',
]
