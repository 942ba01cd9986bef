"""
Generic support for recording operations, with the option
of undoing those operations.

An OpHistory is handed back to the caller of a mutating operation.
Calling it replays the recorded reversals most-recent-first.  Each
history can be reverted once; histories from separate operations
must be reverted in reverse chronological order.
"""
import logging

log=logging.getLogger(__name__)

class RevertError(Exception):
    """ The history was already reverted, or a revert is in progress
    """
    pass

class OpHistory(object):
    state='inactive' # 'recording','reverting','reverted','failed'
    RevertError=RevertError

    log=log

    def __init__(self,lock=None):
        """
        lock: optional context manager held while reverting, typically
        the lock of the structure which recorded the operations.
        """
        self.op_stack=[]
        self.lock=lock
        self.state='recording'

    def __len__(self):
        return len(self.op_stack)

    def __repr__(self):
        return "<OpHistory %s, %d ops>"%(self.state,len(self.op_stack))

    def push_op(self,meth,*data,**kwdata):
        if self.state!='recording':
            return
        self.op_stack.append( (meth,data,kwdata) )

    def pop_op(self):
        assert self.state=='reverting'

        f = self.op_stack.pop()
        self.log.debug("popping: %s"%( str(f) ) )
        meth = f[0]
        args = f[1]
        kwargs = f[2]

        meth(*args,**kwargs)

    def revert(self):
        """
        Undo all recorded operations.  The first failure propagates, and
        leaves the remaining operations on the stack.
        """
        if self.state!='recording':
            raise self.RevertError("Tried to revert, but state is %s"%self.state)
        if self.lock is not None:
            with self.lock:
                self._revert()
        else:
            self._revert()

    def _revert(self):
        self.state='reverting'
        try:
            while self.op_stack:
                self.pop_op()
        except Exception:
            # partial revert is not recoverable
            self.state='failed'
            raise
        self.state='reverted'

    __call__=revert
